"""命令行日志配置

stderr 只输出级别和消息；配置了日志目录时另写带时间和位置的完整日志。
"""
import sys
from pathlib import Path
from typing import Optional
from loguru import logger


CONSOLE_FORMAT = "<level>{level: <8}</level> | {message}"

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level:<8} | "
    "{name}:{function}:{line} | "
    "{message}"
)


def setup_logging(
    level: str,
    log_path: Optional[Path] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """配置日志系统
    
    Args:
        level: stderr 日志级别，由 --debug 或 DICEKIT_LOG_LEVEL 决定
        log_path: 日志文件目录，为空时只输出到 stderr
        rotation: 文件轮转策略
        retention: 文件保留策略
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT, colorize=True)

    if log_path is None:
        return

    log_path = Path(log_path)
    log_path.mkdir(parents=True, exist_ok=True)

    # 文件中总是记录完整的 DEBUG 日志，错误另存一份
    for filename, file_level in (("dicekit_{time:YYYY-MM-DD}.log", "DEBUG"),
                                 ("error_{time:YYYY-MM-DD}.log", "ERROR")):
        logger.add(
            log_path / filename,
            level=file_level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
        )

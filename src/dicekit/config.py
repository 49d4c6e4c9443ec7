"""配置管理模块"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置，环境变量前缀 DICEKIT_"""

    model_config = SettingsConfigDict(
        env_prefix="DICEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 日志配置
    log_level: str = "ERROR"
    log_path: Optional[Path] = None  # 为空时不写日志文件
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    # 骰点配置
    max_dice: int = Field(100, ge=1)  # 单个表达式最多骰子数
    max_faces: int = Field(1000, ge=1)
    max_explosions: int = Field(100, ge=1)  # 单个骰子最多连续爆炸次数
    seed: Optional[int] = None

    # 输出配置
    color: bool = True

    def safe_dict(self) -> dict:
        """返回配置字典，用于日志输出"""
        return {k: str(v) if isinstance(v, Path) else v for k, v in self.model_dump().items()}


settings = Settings()

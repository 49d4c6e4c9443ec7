"""命令行入口"""
import argparse
import sys
from typing import List, Optional, Union

from loguru import logger
from rich.console import Console

from . import __version__
from .config import settings
from .dice import DiceError, DiceParser, DiceRoller, RollResult, format_result, format_total
from .logging import log_roll, setup_logging as configure_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        prog="dicekit",
        description="骰点表达式，格式为 [A]dB[保留][修正]，如 3d6+2, d%, 4d8h2!",
    )
    parser.add_argument(
        "rolls",
        nargs="+",
        help="一个或多个骰点表达式",
    )
    parser.add_argument(
        "--simple", "-s",
        action="store_true",
        help="只输出总和",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="启用 DEBUG 日志级别",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="随机数种子",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="禁用彩色输出",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


@log_roll
def evaluate_notation(
    notation: str, roller: DiceRoller
) -> List[Union[RollResult, DiceError]]:
    """解析并执行一个输入中的所有表达式

    语法错误直接抛出；单个表达式执行出错时记录错误并继续执行其余表达式。
    """
    results: List[Union[RollResult, DiceError]] = []
    exprs = DiceParser.parse(
        notation, max_dice=settings.max_dice, max_faces=settings.max_faces
    )
    for expr in exprs:
        try:
            results.append(roller.roll(expr))
        except DiceError as e:
            logger.warning(
                f"ROLL_EXPR_ERR | input={notation} | expr={expr} | "
                f"error={type(e).__name__}: {e}"
            )
            results.append(e)
    return results


def main(argv: Optional[List[str]] = None) -> int:
    """主函数，返回退出码：全部成功为 0，任一输入失败为 1"""
    args = parse_args(argv)

    # 命令行 --debug 优先于配置
    log_level = "DEBUG" if args.debug else settings.log_level
    configure_logging(
        level=log_level,
        log_path=settings.log_path,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    logger.debug(f"配置: {settings.safe_dict()}")

    seed = args.seed if args.seed is not None else settings.seed
    roller = DiceRoller(seed=seed, max_explosions=settings.max_explosions)

    no_color = args.no_color or not settings.color
    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    err_console = Console(stderr=True, no_color=no_color, highlight=False, soft_wrap=True)

    failed = False
    for notation in args.rolls:
        try:
            results = evaluate_notation(notation, roller)
        except DiceError as e:
            err_console.print(f"错误: {e}", markup=False)
            failed = True
            continue

        for result in results:
            if isinstance(result, DiceError):
                err_console.print(
                    f"错误: {notation} ({result.notation}): {result.message}",
                    markup=False,
                )
                failed = True
            elif args.simple:
                console.print(format_total(result))
            else:
                console.print(format_result(result))

    return 1 if failed else 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

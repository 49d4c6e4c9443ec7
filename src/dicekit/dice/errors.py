"""骰点错误类型

所有错误都只影响单个表达式/单个输入，由调用方按输入捕获并报告。
"""
from typing import Optional


class DiceError(Exception):
    """骰点错误基类"""

    def __init__(self, message: str, notation: str = ""):
        super().__init__(message)
        self.message = message
        self.notation = notation  # 出错的输入或规范表达式

    def __str__(self) -> str:
        if self.notation:
            return f"{self.notation}: {self.message}"
        return self.message


class InvalidNotation(DiceError):
    """表达式语法错误"""

    def __init__(
        self,
        notation: str,
        column: Optional[int] = None,
        message: str = "无效的骰点表达式",
    ):
        if column is not None:
            message = f"{message} (第 {column} 列)"
        super().__init__(message, notation)
        self.column = column


class InvalidModifier(DiceError):
    """爆炸阈值超出 [1, 面数]"""


class InvalidRetention(DiceError):
    """保留数量超过骰子数量"""


class DiceArithmeticError(DiceError, ArithmeticError):
    """修正运算错误（除以零）"""


class ExplosionLimitExceeded(InvalidModifier):
    """单个骰子的连续爆炸次数超过上限"""


class DiceLimitExceeded(DiceError):
    """骰子数量或面数超过上限"""

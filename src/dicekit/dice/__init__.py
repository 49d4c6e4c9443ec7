"""骰点模块"""
from .errors import (
    DiceArithmeticError,
    DiceError,
    DiceLimitExceeded,
    ExplosionLimitExceeded,
    InvalidModifier,
    InvalidNotation,
    InvalidRetention,
)
from .formatter import format_result, format_total
from .parser import (
    DiceParser,
    Modifier,
    ModifierKind,
    RetentionKind,
    RetentionPolicy,
    RollExpression,
)
from .roller import DiceRoller, DieOutcome, DieQuality, RollResult

__all__ = [
    "DiceParser", "DiceRoller",
    "RollExpression", "RetentionPolicy", "RetentionKind", "Modifier", "ModifierKind",
    "RollResult", "DieOutcome", "DieQuality",
    "format_result", "format_total",
    "DiceError", "InvalidNotation", "InvalidModifier", "InvalidRetention",
    "DiceArithmeticError", "ExplosionLimitExceeded", "DiceLimitExceeded",
]

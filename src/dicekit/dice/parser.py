"""骰点表达式解析器"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from loguru import logger
from pyparsing import ParseBaseException, ParseResults

from .errors import (
    DiceArithmeticError,
    DiceError,
    DiceLimitExceeded,
    InvalidModifier,
    InvalidNotation,
    InvalidRetention,
)
from .grammar import parse_rolls

DEFAULT_COUNT = 1
DEFAULT_FACES = 6
PERCENTILE_FACES = 100
DEFAULT_MAX_DICE = 100
DEFAULT_MAX_FACES = 1000


class RetentionKind(Enum):
    """保留策略"""
    ALL = ""
    HIGHEST = "h"
    LOWEST = "l"


@dataclass(frozen=True)
class RetentionPolicy:
    """保留策略及保留数量"""

    kind: RetentionKind = RetentionKind.ALL
    amount: int = 0  # ALL 时无意义

    def __post_init__(self):
        if self.amount < 0:
            raise InvalidRetention(
                f"保留数量 {self.amount} 不能为负数", f"{self.kind.value}{self.amount}"
            )

    @classmethod
    def all(cls) -> "RetentionPolicy":
        return cls()

    @classmethod
    def highest(cls, amount: int) -> "RetentionPolicy":
        return cls(RetentionKind.HIGHEST, amount)

    @classmethod
    def lowest(cls, amount: int) -> "RetentionPolicy":
        return cls(RetentionKind.LOWEST, amount)

    def notation(self) -> str:
        if self.kind is RetentionKind.ALL:
            return ""
        return f"{self.kind.value}{self.amount}"


class ModifierKind(Enum):
    """修正类型，值为表达式中的符号"""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "x"
    DIVIDE = "/"
    EXPLODE = "!"


@dataclass(frozen=True)
class Modifier:
    """单个修正"""

    kind: ModifierKind
    operand: int

    def notation(self, faces: int) -> str:
        if self.kind is ModifierKind.EXPLODE and self.operand == faces:
            return "!"
        return f"{self.kind.value}{self.operand}"


@dataclass(frozen=True)
class RollExpression:
    """一组骰子的表达式，如 4d8h2!"""

    faces: int = DEFAULT_FACES
    count: int = DEFAULT_COUNT
    retention: RetentionPolicy = field(default_factory=RetentionPolicy)
    modifiers: Tuple[Modifier, ...] = ()

    def __post_init__(self):
        if self.faces < 1 or self.count < 1:
            raise InvalidNotation(
                f"{self.count}d{self.faces}", message="骰子数量和面数必须至少为 1"
            )

    @property
    def explode_modifiers(self) -> List[Modifier]:
        return [m for m in self.modifiers if m.kind is ModifierKind.EXPLODE]

    @property
    def arithmetic_modifiers(self) -> List[Modifier]:
        return [m for m in self.modifiers if m.kind is not ModifierKind.EXPLODE]

    def notation(self) -> str:
        """规范表达式，100 面写作 %"""
        faces = "%" if self.faces == PERCENTILE_FACES else str(self.faces)
        mods = "".join(m.notation(self.faces) for m in self.modifiers)
        return f"{self.count}d{faces}{self.retention.notation()}{mods}"

    def __str__(self) -> str:
        return self.notation()


class DiceParser:
    """骰点表达式解析器"""

    @classmethod
    def parse(
        cls,
        notation: str,
        max_dice: int = DEFAULT_MAX_DICE,
        max_faces: int = DEFAULT_MAX_FACES,
    ) -> List[RollExpression]:
        """解析输入，返回其中的所有骰点表达式

        Raises:
            InvalidNotation: 语法错误
            DiceLimitExceeded: 骰子数量或面数超过上限
            InvalidModifier: 爆炸阈值超出 [1, 面数]
            DiceArithmeticError: 除以零
        """
        try:
            tree = parse_rolls(notation)
        except ParseBaseException as e:
            raise InvalidNotation(notation, column=e.column) from e

        expressions = [
            cls._build(node, notation, max_dice, max_faces) for node in tree
        ]
        logger.debug(
            f"PARSE | input={notation!r} | "
            f"expressions={[e.notation() for e in expressions]}"
        )
        return expressions

    @classmethod
    def is_valid(cls, notation: str) -> bool:
        """检查表达式是否有效"""
        try:
            cls.parse(notation)
        except DiceError:
            return False
        return True

    @classmethod
    def _build(
        cls, node: ParseResults, notation: str, max_dice: int, max_faces: int
    ) -> RollExpression:
        """将语法树节点转换为 RollExpression"""
        dice = node["dice"]
        count = int(dice.get("count") or DEFAULT_COUNT)
        faces_str = dice.get("faces") or str(DEFAULT_FACES)
        faces = PERCENTILE_FACES if faces_str == "%" else int(faces_str)

        if count > max_dice:
            raise DiceLimitExceeded(f"骰子数量过多 (最多 {max_dice})", notation)
        if faces > max_faces:
            raise DiceLimitExceeded(f"骰子面数过多 (最多 {max_faces})", notation)

        retention = RetentionPolicy.all()
        ret = node.get("retention")
        if ret is not None:
            amount = int(ret["amount"])
            if ret["kind"] == RetentionKind.HIGHEST.value:
                retention = RetentionPolicy.highest(amount)
            else:
                retention = RetentionPolicy.lowest(amount)

        modifiers = []
        for mod in node.get("modifiers", []):
            kind = ModifierKind(mod["op"])
            operand_str = mod.get("operand") or ""

            if kind is ModifierKind.EXPLODE:
                threshold = int(operand_str) if operand_str else faces
                if not 1 <= threshold <= faces:
                    raise InvalidModifier(
                        f"爆炸阈值 {threshold} 超出范围 [1, {faces}]", notation
                    )
                modifiers.append(Modifier(kind, threshold))
                continue

            operand = int(operand_str)
            if kind is ModifierKind.DIVIDE and operand == 0:
                raise DiceArithmeticError("不能除以零", notation)
            modifiers.append(Modifier(kind, operand))

        return RollExpression(
            faces=faces,
            count=count,
            retention=retention,
            modifiers=tuple(modifiers),
        )

"""骰点执行器"""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from .errors import (
    DiceArithmeticError,
    ExplosionLimitExceeded,
    InvalidModifier,
    InvalidRetention,
)
from .parser import ModifierKind, RetentionKind, RollExpression

DEFAULT_MAX_EXPLOSIONS = 100


class DieQuality(Enum):
    """单个骰子的品质，仅用于展示"""
    GOOD = "good"  # 最大值
    REGULAR = "regular"
    BAD = "bad"  # 1


@dataclass
class DieOutcome:
    """单个骰子结果"""

    value: int
    retained: bool = True
    quality: DieQuality = DieQuality.REGULAR

    @classmethod
    def classify(cls, value: int, faces: int) -> "DieOutcome":
        if value == faces:
            quality = DieQuality.GOOD
        elif value == 1:
            quality = DieQuality.BAD
        else:
            quality = DieQuality.REGULAR
        return cls(value=value, quality=quality)


@dataclass
class RollResult:
    """骰点结果"""

    canonical_input: str
    total: int = 0
    outcomes: List[DieOutcome] = field(default_factory=list)  # 含爆炸追加的骰子，按投掷顺序

    @property
    def kept(self) -> List[int]:
        return [o.value for o in self.outcomes if o.retained]

    @property
    def dropped(self) -> List[int]:
        return [o.value for o in self.outcomes if not o.retained]

    def __str__(self) -> str:
        values = ", ".join(
            str(o.value) if o.retained else f"~~{o.value}~~" for o in self.outcomes
        )
        return f"{self.canonical_input:<10}: {self.total:<4} [{values}]"


class DiceRoller:
    """骰点执行器

    随机源需提供 randint(a, b)，默认每个实例独享一个 random.Random，
    不使用模块级全局随机数生成器。
    """

    def __init__(
        self,
        rng=None,
        seed: Optional[int] = None,
        max_explosions: int = DEFAULT_MAX_EXPLOSIONS,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_explosions = max_explosions

    def roll(self, expr: RollExpression) -> RollResult:
        """执行骰点"""
        notation = expr.notation()
        explode_at = self._explode_threshold(expr, notation)

        outcomes = self._draw(expr, explode_at, notation)
        self._apply_retention(expr, outcomes, notation)

        total = sum(o.value for o in outcomes if o.retained)
        total = self._apply_modifiers(expr, total, notation)

        logger.debug(
            f"ROLL_DRAW | expr={notation} | "
            f"values={[o.value for o in outcomes]} | total={total}"
        )
        return RollResult(canonical_input=notation, total=total, outcomes=outcomes)

    def roll_all(self, exprs: Iterable[RollExpression]) -> List[RollResult]:
        """依次执行多个表达式"""
        return [self.roll(expr) for expr in exprs]

    @staticmethod
    def _explode_threshold(expr: RollExpression, notation: str) -> Optional[int]:
        """第一个爆炸修正的阈值，没有则为 None"""
        explodes = expr.explode_modifiers
        if not explodes:
            return None
        threshold = explodes[0].operand
        if not 1 <= threshold <= expr.faces:
            raise InvalidModifier(
                f"爆炸阈值 {threshold} 超出范围 [1, {expr.faces}]", notation
            )
        return threshold

    def _draw(
        self, expr: RollExpression, explode_at: Optional[int], notation: str
    ) -> List[DieOutcome]:
        outcomes: List[DieOutcome] = []
        for _ in range(expr.count):
            value = self.rng.randint(1, expr.faces)
            outcomes.append(DieOutcome.classify(value, expr.faces))

            if explode_at is None:
                continue

            extra = 0
            while value >= explode_at:
                if extra >= self.max_explosions:
                    raise ExplosionLimitExceeded(
                        f"连续爆炸超过 {self.max_explosions} 次", notation
                    )
                value = self.rng.randint(1, expr.faces)
                outcomes.append(DieOutcome.classify(value, expr.faces))
                extra += 1
        return outcomes

    @staticmethod
    def _apply_retention(
        expr: RollExpression, outcomes: List[DieOutcome], notation: str
    ) -> None:
        """按保留策略标记被丢弃的骰子

        相同点数按在骰池中出现的先后顺序丢弃，而不是按骰子序号。
        """
        retention = expr.retention
        if retention.kind is RetentionKind.ALL:
            return

        if retention.amount > expr.count:
            raise InvalidRetention(
                f"保留数量 {retention.amount} 超过骰子数量 {expr.count}", notation
            )

        removals = sorted(
            (o.value for o in outcomes),
            reverse=retention.kind is RetentionKind.LOWEST,
        )
        removals = removals[: max(len(outcomes) - retention.amount, 0)]

        for outcome in outcomes:
            if outcome.value in removals:
                removals.remove(outcome.value)
                outcome.retained = False

    @staticmethod
    def _apply_modifiers(expr: RollExpression, total: int, notation: str) -> int:
        """按出现顺序对总和应用四则修正"""
        for mod in expr.arithmetic_modifiers:
            if mod.kind is ModifierKind.ADD:
                total += mod.operand
            elif mod.kind is ModifierKind.SUBTRACT:
                total -= mod.operand
            elif mod.kind is ModifierKind.MULTIPLY:
                total *= mod.operand
            elif mod.kind is ModifierKind.DIVIDE:
                if mod.operand == 0:
                    raise DiceArithmeticError("不能除以零", notation)
                # 向零截断
                quotient = abs(total) // mod.operand
                total = quotient if total >= 0 else -quotient
        return total

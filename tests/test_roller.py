"""骰点执行器单元测试"""
import pytest
import random
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dicekit.dice import (
    DiceArithmeticError,
    DiceError,
    DiceParser,
    DiceRoller,
    DieOutcome,
    DieQuality,
    ExplosionLimitExceeded,
    InvalidModifier,
    InvalidRetention,
    Modifier,
    ModifierKind,
    RetentionKind,
    RollExpression,
)


class ScriptedRandom:
    """按顺序返回预设点数的随机源"""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.values.pop(0)


def roll(notation, values, **kwargs):
    [expr] = DiceParser.parse(notation)
    rng = ScriptedRandom(values)
    return DiceRoller(rng=rng, **kwargs).roll(expr), rng


class TestScenarios:
    """测试固定点数的典型场景"""

    def test_single_d20(self):
        result, _ = roll("1d20", [15])
        assert result.total == 15
        assert result.outcomes == [DieOutcome(15, True, DieQuality.REGULAR)]
        assert result.canonical_input == "1d20"

    def test_keep_highest(self):
        """3d6h2 保留 5 和 4，丢弃 2"""
        result, _ = roll("3d6h2", [2, 5, 4])
        assert result.kept == [5, 4]
        assert result.dropped == [2]
        assert result.total == 9

    def test_explode_chain(self):
        """2d6!6: 第一个骰子 6 爆炸出 3，第二个骰子 2"""
        result, _ = roll("2d6!6", [6, 3, 2])
        assert [o.value for o in result.outcomes] == [6, 3, 2]
        assert all(o.retained for o in result.outcomes)
        assert result.total == 11
        assert result.outcomes[0].quality is DieQuality.GOOD

    def test_percentile(self):
        result, rng = roll("d%", [57])
        assert result.total == 57
        assert len(result.outcomes) == 1
        assert rng.calls == [(1, 100)]
        assert result.canonical_input == "1d%"


class TestRetention:
    """测试保留策略"""

    def test_highest_duplicates_drop_in_pool_order(self):
        """相同点数按骰池顺序先遇到的先丢弃"""
        result, _ = roll("3d6h1", [5, 3, 5])
        assert [o.retained for o in result.outcomes] == [False, False, True]
        assert result.total == 5

    def test_lowest_duplicates_drop_in_pool_order(self):
        result, _ = roll("3d6l1", [2, 4, 2])
        assert [o.retained for o in result.outcomes] == [False, False, True]
        assert result.total == 2

    def test_lowest(self):
        result, _ = roll("4d8l2", [7, 1, 8, 3])
        assert result.kept == [1, 3]
        assert result.dropped == [7, 8]
        assert result.total == 4

    def test_retention_over_exploded_pool(self):
        """保留策略作用于包含爆炸骰子的整个骰池"""
        result, _ = roll("2d6h1!", [6, 4, 3])
        assert [o.value for o in result.outcomes] == [6, 4, 3]
        assert [o.retained for o in result.outcomes] == [True, False, False]
        assert result.total == 6

    def test_retention_exceeds_count(self):
        with pytest.raises(InvalidRetention) as exc:
            roll("2d6h3", [1, 2])
        assert exc.value.notation == "2d6h3"

    def test_keep_zero(self):
        result, _ = roll("2d6h0", [3, 4])
        assert result.kept == []
        assert result.total == 0

    @pytest.mark.parametrize("seed", range(20))
    def test_exact_retained_count(self, seed):
        """无爆炸时恰好保留 n 个骰子"""
        [high, low] = DiceParser.parse("6d6h4 6d6l2")
        roller = DiceRoller(seed=seed)
        assert len(roller.roll(high).kept) == 4
        assert len(roller.roll(low).kept) == 2


class TestModifiers:
    """测试四则修正"""

    def test_sum_with_modifier(self):
        result, _ = roll("4d6+3", [1, 2, 3, 4])
        assert result.total == 13

    @pytest.mark.parametrize("notation,values,expected", [
        ("d6+2x3", [4], 18),
        ("d6x3+2", [4], 14),
        ("d6-5/2", [1], -2),
        ("d6-6/4", [1], -1),
        ("d6/4", [6], 1),
        ("2d6-3", [1, 1], -1),
    ])
    def test_modifiers_in_order(self, notation, values, expected):
        """修正按顺序作用，除法向零截断"""
        result, _ = roll(notation, values)
        assert result.total == expected

    def test_divide_by_zero_on_hand_built_expression(self):
        expr = RollExpression(
            faces=6, count=1, modifiers=(Modifier(ModifierKind.DIVIDE, 0),)
        )
        with pytest.raises(DiceArithmeticError):
            DiceRoller(rng=ScriptedRandom([3])).roll(expr)


class TestExplosion:
    """测试爆炸"""

    def test_invalid_threshold_fails_before_drawing(self):
        expr = RollExpression(
            faces=6, count=2, modifiers=(Modifier(ModifierKind.EXPLODE, 7),)
        )
        rng = ScriptedRandom([])
        with pytest.raises(InvalidModifier):
            DiceRoller(rng=rng).roll(expr)
        assert rng.calls == []

    def test_only_first_explode_counts(self):
        result, _ = roll("d6!5!6", [5, 2])
        assert [o.value for o in result.outcomes] == [5, 2]

    def test_chain_limit(self):
        """d1! 每次都会爆炸，超过上限时报错"""
        [expr] = DiceParser.parse("d1!")
        with pytest.raises(ExplosionLimitExceeded) as exc:
            DiceRoller(seed=0, max_explosions=5).roll(expr)
        assert isinstance(exc.value, InvalidModifier)

    @pytest.mark.parametrize("seed", range(20))
    def test_chains_end_below_threshold(self, seed):
        """每条爆炸链的最后一个骰子低于阈值"""
        [expr] = DiceParser.parse("10d6!5")
        result = DiceRoller(seed=seed).roll(expr)
        values = [o.value for o in result.outcomes]
        assert len(values) >= 10
        assert values[-1] < 5
        # 低于阈值的骰子数量等于原始骰子数量
        assert sum(1 for v in values if v < 5) == 10


class TestDraws:
    """测试点数范围和结果结构"""

    @pytest.mark.parametrize("count,faces", [(1, 1), (3, 2), (10, 6), (5, 20), (4, 100)])
    def test_values_in_range(self, count, faces):
        expr = RollExpression(faces=faces, count=count)
        roller = DiceRoller(rng=random.Random(42))
        for _ in range(50):
            result = roller.roll(expr)
            assert len(result.outcomes) == count
            assert all(1 <= o.value <= faces for o in result.outcomes)

    def test_quality(self):
        assert DieOutcome.classify(6, 6).quality is DieQuality.GOOD
        assert DieOutcome.classify(1, 6).quality is DieQuality.BAD
        assert DieOutcome.classify(3, 6).quality is DieQuality.REGULAR
        assert DieOutcome.classify(1, 1).quality is DieQuality.GOOD

    def test_expression_can_be_rolled_again(self):
        """同一表达式可重复执行，互不影响"""
        [expr] = DiceParser.parse("3d6h2")
        roller = DiceRoller(rng=ScriptedRandom([2, 5, 4, 6, 6, 1]))
        first = roller.roll(expr)
        second = roller.roll(expr)
        assert first.total == 9
        assert second.total == 12
        assert expr.retention.kind is RetentionKind.HIGHEST

    def test_seeded_rollers_repeat(self):
        [expr] = DiceParser.parse("8d10!")
        a = DiceRoller(seed=7).roll(expr)
        b = DiceRoller(seed=7).roll(expr)
        assert a == b

    def test_roll_all(self):
        exprs = DiceParser.parse("d6 d4")
        results = DiceRoller(rng=ScriptedRandom([6, 1])).roll_all(exprs)
        assert [r.total for r in results] == [6, 1]

    def test_str(self):
        result, _ = roll("3d6h2", [2, 5, 4])
        assert str(result) == "3d6h2     : 9    [~~2~~, 5, 4]"

    def test_invalid_faces_is_dice_error(self):
        """0 面骰在构建时报告为 DiceError，而不是随机源的 ValueError"""
        with pytest.raises(DiceError):
            DiceRoller(rng=random.Random(0)).roll(RollExpression(faces=0, count=1))

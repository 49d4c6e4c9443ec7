"""骰点结果展示单元测试"""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dicekit.dice import DieOutcome, DieQuality, RollResult, format_result, format_total
from dicekit.dice.formatter import DROPPED_STYLE, QUALITY_STYLES, format_outcome


def make_result():
    return RollResult(
        canonical_input="3d6h2",
        total=7,
        outcomes=[
            DieOutcome(1, False, DieQuality.BAD),
            DieOutcome(6, True, DieQuality.GOOD),
            DieOutcome(1, True, DieQuality.BAD),
        ],
    )


class TestFormatter:
    """测试结果格式化"""

    def test_full_plain_text(self):
        text = format_result(make_result())
        assert text.plain == "3d6h2     : 7    [1, 6, 1]"

    def test_total_only(self):
        assert format_total(make_result()).plain == "7"

    def test_quality_styles_are_distinct(self):
        assert len(set(QUALITY_STYLES.values())) == 3

    def test_outcome_styles(self):
        """品质决定颜色，被丢弃的骰子加删除线"""
        good = format_outcome(DieOutcome(6, True, DieQuality.GOOD))
        dropped = format_outcome(DieOutcome(1, False, DieQuality.BAD))
        assert str(good.style) == QUALITY_STYLES[DieQuality.GOOD]
        assert DROPPED_STYLE in str(dropped.style)
        assert QUALITY_STYLES[DieQuality.BAD] in str(dropped.style)

    def test_spans_follow_outcomes(self):
        text = format_result(make_result())
        styles = [str(span.style) for span in text.spans]
        assert len(styles) == 3
        assert "strike" in styles[0]
        assert "strike" not in styles[1]

"""骰点结果展示"""
from rich.text import Text

from .roller import DieOutcome, DieQuality, RollResult

QUALITY_STYLES = {
    DieQuality.GOOD: "bold green",
    DieQuality.BAD: "bold red",
    DieQuality.REGULAR: "default",
}
DROPPED_STYLE = "strike dim"


def format_outcome(outcome: DieOutcome) -> Text:
    style = QUALITY_STYLES[outcome.quality]
    if not outcome.retained:
        style = f"{style} {DROPPED_STYLE}"
    return Text(str(outcome.value), style=style)


def format_result(result: RollResult) -> Text:
    """完整结果: 规范表达式、总和、各骰子点数"""
    text = Text(f"{result.canonical_input:<10}: {result.total:<4} [")
    for i, outcome in enumerate(result.outcomes):
        if i:
            text.append(", ")
        text.append_text(format_outcome(outcome))
    text.append("]")
    return text


def format_total(result: RollResult) -> Text:
    """仅总和"""
    return Text(str(result.total))

"""骰点表达式文法

    Rolls      := RollExpr+ EOI
    RollExpr   := Dice Retention? Modifier*
    Dice       := Count? 'd' Faces
    Retention  := ('h' | 'l') digit+
    Modifier   := ('+' | '-' | 'x' | '/') digit+ | '!' digit*

骰子项内部不允许空白；骰子项之间、修正符之前、四则运算符与数字之间允许空白。
"!" 与阈值之间不允许空白，否则 "d6! 2d8" 中的 2 会被当作阈值。
"""
from pyparsing import (
    Group,
    OneOrMore,
    Optional,
    ParserElement,
    ParseResults,
    Regex,
    StringEnd,
    ZeroOrMore,
)

ParserElement.enable_packrat()

# 数量和面数不能以 0 开头，"%" 后不能紧跟数字
DICE = Regex(
    r"(?P<count>[1-9][0-9]*)?d(?P<faces>%(?![0-9])|[1-9][0-9]*)"
).set_name("dice")

RETENTION = Regex(r"(?P<kind>[hl])(?P<amount>[0-9]+)").set_name("retention")

ARITHMETIC = Regex(r"(?P<op>[-+x/])\s*(?P<operand>[0-9]+)").set_name("arithmetic")
EXPLODE = Regex(r"(?P<op>!)(?P<operand>[0-9]*)").set_name("explode")
MODIFIER = Group(ARITHMETIC | EXPLODE)

ROLL_EXPRESSION = Group(
    Group(DICE)("dice")
    + Optional(Group(RETENTION)("retention"))
    + Group(ZeroOrMore(MODIFIER))("modifiers")
).set_name("roll expression")

ROLLS = OneOrMore(ROLL_EXPRESSION) + StringEnd()


def parse_rolls(text: str) -> ParseResults:
    """解析整个输入，失败时抛出 pyparsing.ParseException"""
    return ROLLS.parse_string(text, parse_all=True)

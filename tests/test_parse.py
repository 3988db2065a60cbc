import logging

import pytest

from combparse import (
    Failure,
    ParseError,
    Parser,
    lazy,
    literal,
    map_,
    one_of,
    one_or_more,
    parse,
    parse_or_raise,
    sequence,
)
from combparse.main import describe_position


def test_parse() -> None:
    assert parse(literal("a"), "a") == "a"
    assert isinstance(parse(literal("a"), "b"), Failure)


def test_parse_requires_the_whole_input() -> None:
    assert literal("a")("ab")

    result = parse(literal("a"), "ab")

    assert isinstance(result, Failure)
    assert result.message == "excess content followed valid input"
    assert result.input == "ab"
    assert result.output == "a"
    assert result.remaining_input == "b"


def test_parse_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="combparse"):
        parse(sequence(["a", "b"]), "ac")

    assert "position 1" in caplog.text
    assert 'input did not begin with "b"' in caplog.text


def test_parse_or_raise() -> None:
    assert parse_or_raise(literal("a"), "a") == "a"

    with pytest.raises(ParseError, match="excess content") as info:
        parse_or_raise(literal("a"), "ab")
    assert info.value.pos == 0
    assert info.value.source == "ab"


def test_failure_error_locates_the_failure() -> None:
    source = "ab\ncd"
    failure = sequence(["ab\nc", "x"])(source)

    assert isinstance(failure, Failure)
    error = failure.error(source)
    assert error.pos == 4
    assert error.msg == 'input did not begin with "x"'
    assert error.__notes__ == ["At position 4 (line 2, column 2)\ncd\n ^"]


def test_describe_position_shortens_long_lines() -> None:
    source = "x" * 30 + "y" + "x" * 30

    description = describe_position(source, 30)

    assert description.splitlines() == [
        "At position 30 (line 1, column 31)",
        "x" * 20 + "y" + "x" * 19,
        " " * 20 + "^",
    ]


def test_readme_example() -> None:
    operator = one_of([literal("+"), literal("-")])
    number = map_(
        one_or_more(one_of([literal(digit) for digit in "0123456789"])),
        lambda digits: int("".join(digits)),
    )

    def combine(outputs: list) -> int:
        a, op, b = outputs
        return a + b if op == "+" else a - b

    compound_expression = map_(sequence([number, operator, lazy(lambda: expression)]), combine)
    expression: Parser[int] = one_of([compound_expression, number])

    assert parse(expression, "2+2-1") == 3
    assert isinstance(parse(expression, "2+"), Failure)


def test_describe_position_only_splits_lines_on_newlines() -> None:
    assert describe_position("ab\rXY\nc", 7) == "At position 7 (line 2, column 2)\nc\n ^"

import pytest

from combparse import Failure, Success, parse
from combparse.general import (
    escape_sequence,
    expect,
    float_number,
    identifier,
    identifier_except,
    integer_number,
    keyword,
    optional_whitespace,
    quoted_string,
    token,
    unicode_escape,
    whitespace,
)


def test_whitespace() -> None:
    assert whitespace(" \t\nx") == Success(" \t\n", "x")
    assert not whitespace("x")
    assert optional_whitespace("x") == Success("", "x")


def test_token() -> None:
    assert token("let")("  let x") == Success("let", "x")
    assert token("let")("let") == Success("let", "")


def test_expect() -> None:
    assert expect("a", "the letter a")("b") == Failure("b", "expected the letter a")
    assert expect("a", "the letter a")("ab") == Success("a", "b")


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("0", 0),
        ("42", 42),
        ("-42", -42),
        ("007", 7),
        ("0b101", 5),
        ("0o17", 15),
        ("0x1F", 31),
        ("-0xff", -255),
    ],
)
def test_integer_number(src: str, expected: int) -> None:
    assert parse(integer_number, src) == expected


def test_integer_number_stops_after_the_digits() -> None:
    assert integer_number("12abc") == Success(12, "abc")
    assert integer_number("0b12") == Success(1, "2")


def test_integer_number_requires_digits_after_a_prefix() -> None:
    assert integer_number("0x") == Failure("", "expected a hexadecimal digit after 0x")
    assert integer_number("0bz") == Failure("z", "expected a binary digit after 0b")
    assert not integer_number("-")
    assert not integer_number("x")


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("1.5", 1.5),
        ("-1.5", -1.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("1.e3", 1000.0),
        ("2.5E-1", 0.25),
    ],
)
def test_float_number(src: str, expected: float) -> None:
    assert parse(float_number, src) == expected


def test_float_number_rejects_integers() -> None:
    assert not float_number("1")
    assert not float_number("1.")
    assert not float_number("e3")


def test_escape_sequence() -> None:
    assert escape_sequence("\\n") == Success("\n", "")
    assert escape_sequence("\\u0041!") == Success("A", "!")
    assert escape_sequence("\\q") == Success("q", "")
    assert escape_sequence("\\\\") == Success("\\", "")
    assert not escape_sequence("\\u00zz")
    assert not escape_sequence("\\")


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ('""', ""),
        ('"abc"', "abc"),
        ("'abc'", "abc"),
        ('"it\'s"', "it's"),
        ("'say \"hi\"'", 'say "hi"'),
        ('"a\\tb"', "a\tb"),
        ('"\\"quoted\\""', '"quoted"'),
        ('"\\u00e9t\\u00e9"', "été"),
    ],
)
def test_quoted_string(src: str, expected: str) -> None:
    assert parse(quoted_string, src) == expected


def test_quoted_string_failures() -> None:
    assert not quoted_string('"abc')
    assert not quoted_string("abc")
    assert not quoted_string('"\\u12"')
    assert quoted_string('"abc') == Failure('"abc', 'input did not begin with "\'"')


def test_identifier() -> None:
    assert identifier("foo_1 bar") == Success("foo_1", " bar")
    assert identifier("_x") == Success("_x", "")
    assert not identifier("1x")


def test_keyword() -> None:
    assert keyword("if")("if x") == Success("if", " x")
    assert keyword("if")("if(") == Success("if", "(")
    assert keyword("if")("iffy") == Failure("iffy", "input was unexpectedly followed by an identifier character")


def test_identifier_except() -> None:
    name = identifier_except("if", "else")

    assert name("iffy") == Success("iffy", "")
    assert name("x") == Success("x", "")
    assert name("else") == Failure("else", "input was unexpectedly a reserved word")
    assert identifier_except("if")("if") == Failure("if", "input was unexpectedly a reserved word")
    with pytest.raises(ValueError):
        identifier_except()


def test_unicode_escape_failure_points_into_the_input() -> None:
    src = "u00zzrest"
    result = unicode_escape(src)

    assert result == Failure("00zzrest", "expected 4 hexadecimal characters after a unicode escape")
    assert isinstance(result, Failure)
    assert result.error(src).pos == 1
    assert unicode_escape("u00e9rest") == Success("é", "rest")

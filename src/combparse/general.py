"""
General purpose parsers, built only from the primitives and combinators.

They are also meant to be read as examples of using the combinators.
"""

from __future__ import annotations
from typing import Any, TypeVar

import re

import combparse.const as const
from combparse.main import (
    Failure,
    FactoryParameter,
    NOTHING,
    NothingType,
    Parser,
    Success,
    any_single_character,
    as_,
    but_not,
    flat_map,
    lookahead_not,
    map_,
    one_of,
    optional,
    regular_expression,
    sequence,
    to_parser,
    zero_or_more,
)

_T = TypeVar("_T")


def char_class(chars: str, repetition: str = "") -> Parser[str]:
    """Matches one of `chars`. `repetition` is appended to the regex, e.g. `+` or `*`."""
    return regular_expression(f"[{re.escape(chars)}]{repetition}")

def expect(parser: FactoryParameter[_T], description: str) -> Parser[_T]:
    """
    Parser factory.

    Replaces the failure message of `parser` with `expected <description>`.
    """
    inner = to_parser(parser)
    message = f"expected {description}"
    def expect_parser(src: str) -> Success[_T] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return Failure(result.input, message)
        return result
    return expect_parser

# whitespace

whitespace = char_class(const.WHITESPACES, "+")
"""One or more whitespaces. Outputs the matched text."""

optional_whitespace = char_class(const.WHITESPACES, "*")
"""Zero or more whitespaces. Never fails."""

def token(parser: FactoryParameter[_T]) -> Parser[_T]:
    """Parser factory. `parser` with optional whitespace around it."""
    return map_(sequence([optional_whitespace, parser, optional_whitespace]), lambda outputs: outputs[1])

# numbers

_BASES: dict[str, tuple[str, str, int]] = {
    "0b": (const.BINARY, "binary", 2),
    "0o": (const.OCTAL, "octal", 8),
    "0x": (const.HEXADECIMAL, "hexadecimal", 16),
}

def _digits_after(prefix: str | NothingType) -> Parser[int]:
    if prefix is NOTHING:
        return map_(char_class(const.DECIMAL, "+"), int)
    digits, kind, base = _BASES[prefix]
    return map_(
        expect(char_class(digits, "+"), f"a {kind} digit after {prefix}"),
        lambda text: int(text, base=base),
    )

integer_number: Parser[int] = map_(
    sequence([optional("-"), flat_map(optional(one_of(list(_BASES))), _digits_after)]),
    lambda outputs: -outputs[1] if outputs[0] == "-" else outputs[1],
)
"""
An integer, with an optional `-` sign.

The base is interpreted from the prefix:
- `0b`: Binary
- `0o`: Octal
- `0x`: Hexadecimal
- No prefix: Decimal
"""

_EXPONENT = r"[eE][-+]?[0-9]+"

float_number: Parser[float] = map_(
    regular_expression(rf"-?(?:[0-9]+(?:\.[0-9]+(?:{_EXPONENT})?|\.?{_EXPONENT})|\.[0-9]+(?:{_EXPONENT})?)"),
    float,
)
"""A decimal number with a fraction, an exponent or both. `1` is not a float, `1.0`, `.5` and `1e3` are."""

# quoted string

unicode_escape: Parser[str] = map_(
    sequence(["u", expect(char_class(const.HEXADECIMAL, "{4}"), "4 hexadecimal characters after a unicode escape")]),
    lambda outputs: chr(int(outputs[1], base=16)),
)
"""`uXXXX`, the part of a unicode escape after the backslash."""

escape_sequence: Parser[str] = map_(
    sequence([
        "\\",
        one_of([
            unicode_escape,
            *(as_(escaped, result) for escaped, result in const.GENERAL_ESCAPES.items()),
            # Anything else stands for itself, except for a malformed unicode escape.
            but_not(any_single_character, "u", "a unicode escape"),
        ]),
    ]),
    lambda outputs: outputs[1],
)

def _quoted(quote: str) -> Parser[str]:
    unescaped = regular_expression(rf"[^{re.escape(quote)}\\]+")
    return map_(
        sequence([quote, zero_or_more(one_of([unescaped, escape_sequence])), expect(quote, f"closing quote `{quote}`")]),
        lambda outputs: "".join(outputs[1]),
    )

quoted_string: Parser[str] = one_of([_quoted('"'), _quoted("'")])
"""A string in double or single quotes, with backslash escapes. Outputs the decoded string."""

# names

identifier: Parser[str] = regular_expression(f"[{const.IDENTIFIER_START}][{const.IDENTIFIER_CONTINUE}]*")

def keyword(word: str) -> Parser[str]:
    """Parser factory. Matches `word`, unless it's only the start of a longer identifier."""
    return lookahead_not(word, char_class(const.IDENTIFIER_CONTINUE), "an identifier character")

def identifier_except(*words: str) -> Parser[str]:
    """Parser factory. Matches an identifier, unless it's one of the reserved `words`."""
    if len(words) <= 0:
        raise ValueError("At least one word required.")
    reserved: Parser[Any] = keyword(words[0]) if len(words) == 1 else one_of([keyword(word) for word in words])
    return but_not(identifier, reserved, "a reserved word")

"""
The implementations of the result model, the primitive parsers and the combinators.
"""

from __future__ import annotations
from typing import Any, Literal, TypeVar, Generic, Final, Callable, Protocol

from collections.abc import Sequence
import enum
import logging
import re


log = logging.getLogger("combparse")


_T = TypeVar("_T")
_U = TypeVar("_U")
_OutputCovT = TypeVar("_OutputCovT", covariant=True)



class NothingType(enum.Enum):
    """The type of `NOTHING`. Has a single member."""
    NOTHING = enum.auto()

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return "NOTHING"

NOTHING: Final = NothingType.NOTHING
"""The output of `nothing`. Distinct from any output a real parser can produce, including `None`."""


class Success(Generic[_OutputCovT]):
    """
    Returned from a parser when it has matched.

    ```
    r = parser(src)
    if r:
        r.output            # the value that was produced
        r.remaining_input   # what is left for the next parser
    else:
        ... # `r` is a `Failure` object
    ```
    """
    def __init__(self, output: _OutputCovT, remaining_input: str) -> None:
        self.output: Final[_OutputCovT] = output
        self.remaining_input: Final[str] = remaining_input

    def __bool__(self) -> Literal[True]:
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Success):
            return NotImplemented
        return self.output == other.output and self.remaining_input == other.remaining_input

    def __repr__(self) -> str:
        return f"Success({self.output!r}, remaining_input={self.remaining_input!r})"

class Failure:
    """
    Returned from a parser when it has failed to match. Can be converted into a `ParseError`.

    `input` is the input the failing parser was given, which is a suffix of the string passed to
    the outermost parser. Use `Failure.error()` to locate it within that string.
    """
    def __init__(
        self,
        input: str,
        message: str,
        *,
        output: Any = NOTHING,
        remaining_input: str | None = None,
    ) -> None:
        """
        `input`: The input the failing parser was given.
        `message`: The reason for the failure.
        `output`: The partial output, if the failure happened after something was produced.
        `remaining_input`: The unconsumed input that belongs to `output`.
        """
        self.input: Final[str] = input
        self.message: Final[str] = message
        self.output: Final[Any] = output
        self.remaining_input: Final[str | None] = remaining_input

    def error(self, source: str | None = None) -> ParseError:
        """
        Converts this to a `ParseError`.

        `source`: The string given to the outermost parser. Defaults to `Failure.input`, which puts
        the error at position 0.
        """
        if source is None:
            source = self.input
        return ParseError(source, max(len(source) - len(self.input), 0), self.message)

    def __bool__(self) -> Literal[False]:
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return self.input == other.input and self.message == other.message

    def __repr__(self) -> str:
        return f"Failure({self.input!r}, {self.message!r})"


def describe_position(source: str, pos: int) -> str:
    """
    Describes a position in `source` for humans: the line and column, and an excerpt of the
    line with a caret under the column.
    """
    pos = min(pos, len(source))
    line = source.count("\n", 0, pos) + 1
    column = pos - source.rfind("\n", 0, pos) # rfind returns -1 on the first line
    description = [f"At position {pos} (line {line}, column {column})"]

    lines = source.split("\n")
    if line <= len(lines) and column-1 <= len(lines[line-1]):
        start = max(column-1 - 20, 0)
        description.append(f"{lines[line-1][start:start+40]}\n{' '*(column-1 - start)}^")
    return "\n".join(description)

class ParseError(Exception):
    """
    The exception raised by `parse_or_raise()`, or created by `Failure.error()`.

    Parsers never raise it on their own.
    """
    def __init__(self, source: str, pos: int, msg: str) -> None:
        """
        `source`: The string that was being parsed.
        `pos`: The position of the failure within `source`.
        `msg`: The reason for the failure.
        """
        super().__init__(msg)
        self.source: Final[str] = source
        self.pos: Final[int] = pos
        self.msg: Final[str] = msg
        self.add_note(describe_position(source, pos))


class Parser(Protocol[_OutputCovT]):
    """
    Anything that can be called with an input string and returns either a `Success` or a `Failure`.

    Parsers must not mutate anything, so a parser can be reused and shared freely.
    """
    def __call__(self, src: str, /) -> Success[_OutputCovT] | Failure: ...

class AlwaysSucceedingParser(Protocol[_OutputCovT]):
    """A parser that never returns a `Failure`."""
    def __call__(self, src: str, /) -> Success[_OutputCovT]: ...

FactoryParameter = Parser[_T] | str | re.Pattern[str]
"""What the combinators accept in place of a parser. Strings become `literal`s, compiled patterns become `regular_expression`s."""

def to_parser(parser: FactoryParameter[_T]) -> Parser[_T]:
    """Converts a `FactoryParameter` into a parser."""
    if isinstance(parser, str):
        return literal(parser) # type: ignore[return-value]
    elif isinstance(parser, re.Pattern):
        return regular_expression(parser) # type: ignore[return-value]
    elif callable(parser):
        return parser
    else:
        raise TypeError(f"Expected a parser, a string or a compiled pattern, got {parser!r}.")

def to_parsers(parsers: Sequence[FactoryParameter[Any]]) -> tuple[Parser[Any], ...]:
    """Converts the `FactoryParameter`s of a combinator that needs at least two parsers."""
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    return tuple(to_parser(parser) for parser in parsers)



def parse(parser: FactoryParameter[_T], src: str) -> _T | Failure:
    """
    Applies `parser` to `src`, requiring it to consume all of it.

    Returns the bare output if it did, and a `Failure` otherwise. This is the only place where
    consuming the whole input is enforced. Every other parser stops wherever its match ends.

    ```
    r = parse(parser, "input")
    if isinstance(r, Failure):
        raise r.error("input")
    ```
    """
    result = to_parser(parser)(src)
    if isinstance(result, Success) and result.remaining_input:
        result = Failure(
            src,
            "excess content followed valid input",
            output=result.output,
            remaining_input=result.remaining_input,
        )
    if isinstance(result, Failure):
        log.debug("parse failed at position %d: %s", len(src) - len(result.input), result.message)
        return result
    return result.output

def parse_or_raise(parser: FactoryParameter[_T], src: str) -> _T:
    """Same as `parse()`, but raises a `ParseError` instead of returning a `Failure`."""
    result = parse(parser, src)
    if isinstance(result, Failure):
        raise result.error(src)
    return result



def any_single_character(src: str) -> Success[str] | Failure:
    """Matches one character (a whole code point, astral characters included)."""
    if not src:
        return Failure(src, "input was empty")
    return Success(src[0], src[1:])

def literal(text: str) -> Parser[str]:
    """
    Parser factory. Matches `text` exactly. Case sensitive.

    An empty `text` always matches without consuming anything.
    """
    message = f'input did not begin with "{text}"'
    size = len(text)
    return lambda src: Success(text, src[size:]) if src.startswith(text) else Failure(src, message)

def nothing(src: str) -> Success[NothingType]:
    """Always matches without consuming anything. The output is `NOTHING`."""
    return Success(NOTHING, src)

def regular_expression(pattern: str | re.Pattern[str], flags: int | re.RegexFlag = 0) -> Parser[str]:
    """
    Parser factory. Matches the regex at the start of the input and outputs the matched text.

    The match is always anchored to the start of the input, even if `pattern` isn't.
    The pattern may match an empty string.
    """
    compiled = re.compile(pattern, flags)
    def inner(src: str) -> Success[str] | Failure:
        m = compiled.match(src)
        if m is None:
            return Failure(src, "input did not match regular expression")
        return Success(m.group(), src[m.end():])
    return inner



def as_(parser: FactoryParameter[Any], new_output: _U) -> Parser[_U]:
    """
    Parser factory.

    Replaces the output of `parser` with `new_output`.
    """
    inner = to_parser(parser)
    def as_parser(src: str) -> Success[_U] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        return Success(new_output, result.remaining_input)
    return as_parser

def map_(parser: FactoryParameter[_T], f: Callable[[_T], _U]) -> Parser[_U]:
    """
    Parser factory.

    Replaces the output of `parser` with `f(output)`. `f` can't reject the output, use `transform_output()` for that.
    """
    inner = to_parser(parser)
    def map_parser(src: str) -> Success[_U] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        return Success(f(result.output), result.remaining_input)
    return map_parser

def transform_output(parser: FactoryParameter[_T], f: Callable[[_T], _U | Failure]) -> Parser[_U]:
    """
    Parser factory.

    Like `map_()`, but `f` may return a `Failure` to reject the output. The failure is returned as-is.

    `f` only sees the output, so it can't point its `Failure` at the right place in the input.
    When the position matters, match only valid text instead and wrap it in `combparse.general.expect()`,
    as `combparse.general.unicode_escape` does.
    """
    inner = to_parser(parser)
    def transform_output_parser(src: str) -> Success[_U] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        new_output = f(result.output)
        if isinstance(new_output, Failure):
            return new_output
        return Success(new_output, result.remaining_input)
    return transform_output_parser

def flat_map(parser: FactoryParameter[_T], f: Callable[[_T], FactoryParameter[_U]]) -> Parser[_U]:
    """
    Parser factory.

    Calls `f` with the output of `parser`, then applies the parser `f` returned to the rest of the input.
    Allows the grammar to depend on what has been parsed so far.

    ```
    # `<b>...</b>`, `<i>...</i>`, etc.
    closing_tag = lambda name: literal(f"</{name}>")
    element = flat_map(
        map_(sequence(["<", regular_expression(r"\\w+"), ">"]), lambda outputs: outputs[1]),
        lambda name: map_(sequence([regular_expression(r"[^<]*"), closing_tag(name)]), lambda outputs: outputs[0]),
    )
    ```
    """
    inner = to_parser(parser)
    def flat_map_parser(src: str) -> Success[_U] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        return to_parser(f(result.output))(result.remaining_input)
    return flat_map_parser

def lazy(thunk: Callable[[], FactoryParameter[_T]]) -> Parser[_T]:
    """
    Parser factory.

    Defers calling `thunk` until the parser is applied. `thunk` is called again on every use.

    Needed for recursive grammars, where a parser refers to itself or to a parser defined later:
    ```
    parenthesized = sequence(["(", lazy(lambda: expression), ")"])
    expression = one_of([parenthesized, regular_expression(r"[0-9]+")])
    ```
    """
    return lambda src: to_parser(thunk())(src)

def one_of(parsers: Sequence[FactoryParameter[Any]]) -> Parser[Any]:
    """
    Parser factory.

    Applies the parsers to the same input, in order, until one of them matches.
    If none match, returns the failure of the last one.
    """
    new_parsers = to_parsers(parsers)
    def one_of_parser(src: str) -> Success[Any] | Failure:
        result: Success[Any] | Failure
        for parser in new_parsers:
            result = parser(src)
            if result:
                return result
        return result
    return one_of_parser

def sequence(parsers: Sequence[FactoryParameter[Any]]) -> Parser[list[Any]]:
    """
    Parser factory.

    All the given parsers must match, one after the other. The output is a list of their outputs, in order.
    Returns the first failure as-is.
    """
    new_parsers = to_parsers(parsers)
    def sequence_parser(src: str) -> Success[list[Any]] | Failure:
        outputs: list[Any] = []
        remaining_input = src
        for parser in new_parsers:
            result = parser(remaining_input)
            if isinstance(result, Failure):
                return result
            outputs.append(result.output)
            remaining_input = result.remaining_input
        return Success(outputs, remaining_input)
    return sequence_parser

def zero_or_more(parser: FactoryParameter[_T]) -> AlwaysSucceedingParser[list[_T]]:
    """
    Parser factory.

    Repeatedly matches the given parser until it fails, and outputs the list of its outputs.
    Never fails. Also stops once the parser outputs `NOTHING`, so wrapping an `optional()` is safe.

    The parser must consume input whenever it matches, otherwise this loops forever.
    """
    inner = to_parser(parser)
    def zero_or_more_parser(src: str) -> Success[list[_T]]:
        outputs: list[_T] = []
        remaining_input = src
        while True:
            result = inner(remaining_input)
            if isinstance(result, Failure):
                break
            remaining_input = result.remaining_input
            if result.output is NOTHING:
                break
            outputs.append(result.output)
        return Success(outputs, remaining_input)
    return zero_or_more_parser

def one_or_more(parser: FactoryParameter[_T]) -> Parser[list[_T]]:
    """
    Parser factory.

    Repeatedly matches the given parser until it fails. Succeeds if it matched at least once.
    """
    inner = to_parser(parser)
    return map_(sequence([inner, zero_or_more(inner)]), lambda outputs: [outputs[0], *outputs[1]])

def optional(parser: FactoryParameter[_T]) -> AlwaysSucceedingParser[_T | NothingType]:
    """
    Parser factory.

    Matches the given parser if possible. Outputs `NOTHING` otherwise.
    """
    return one_of([parser, nothing]) # type: ignore[return-value]

def but_not(parser: FactoryParameter[_T], not_: FactoryParameter[Any], not_name: str) -> Parser[_T]:
    """
    Parser factory.

    Matches `parser`, unless `not_` also matches the same input. `not_name` describes `not_` in the failure message.

    ```
    name = but_not(regular_expression(r"[a-z]+"), one_of(["if", "else"]), "a keyword")
    ```
    """
    inner = to_parser(parser)
    excluded = to_parser(not_)
    message = f"input was unexpectedly {not_name}"
    def but_not_parser(src: str) -> Success[_T] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        if excluded(src):
            return Failure(src, message)
        return result
    return but_not_parser

def lookahead_not(parser: FactoryParameter[_T], not_followed_by: FactoryParameter[Any], followed_by_name: str) -> Parser[_T]:
    """
    Parser factory.

    Matches `parser`, unless `not_followed_by` matches right after it. Nothing is consumed by the lookahead.
    `followed_by_name` describes `not_followed_by` in the failure message.
    """
    inner = to_parser(parser)
    lookahead = to_parser(not_followed_by)
    message = f"input was unexpectedly followed by {followed_by_name}"
    def lookahead_not_parser(src: str) -> Success[_T] | Failure:
        result = inner(src)
        if isinstance(result, Failure):
            return result
        if lookahead(result.remaining_input):
            return Failure(src, message)
        return result
    return lookahead_not_parser

"""
Arithmetic expressions: `+`, `-`, `*`, `/` and parentheses over non-negative integers.

Operators of the same precedence are applied from left to right, so `5-2+1` is `4`.
"""

from __future__ import annotations
from typing import Any, Callable

import operator

import combparse.const as const
from combparse.main import (
    Failure,
    Parser,
    lazy,
    map_,
    one_of,
    one_or_more,
    parse,
    sequence,
    zero_or_more,
)
from combparse.general import token

Number = int | float
Tree = Any
"""Either a number, or `(first, [[symbol, operand], ...])` where `first` and the operands are `Tree`s."""

OPERATORS: dict[str, Callable[[Number, Number], Number]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}

number: Parser[int] = map_(one_or_more(one_of(list(const.DECIMAL))), lambda digits: int("".join(digits)))

def _binary_level(operand: Parser[Tree], symbols: str) -> Parser[Tree]:
    operation = sequence([token(one_of(list(symbols))), operand])
    return map_(
        sequence([operand, zero_or_more(operation)]),
        lambda outputs: (outputs[0], outputs[1]) if outputs[1] else outputs[0],
    )

parenthesized: Parser[Tree] = map_(sequence([token("("), lazy(lambda: expression), token(")")]), lambda outputs: outputs[1])
factor: Parser[Tree] = one_of([token(number), parenthesized])
term = _binary_level(factor, "*/")
expression = _binary_level(term, "+-")
"""Outputs the `Tree` of the expression. Use `compute()` or `evaluate()` for its value."""

def compute(tree: Tree) -> Number:
    """Computes the value of a `Tree`, applying operators from left to right."""
    if isinstance(tree, int):
        return tree
    first, operations = tree
    value = compute(first)
    for symbol, operand in operations:
        value = OPERATORS[symbol](value, compute(operand))
    return value

def evaluate(text: str) -> Number | Failure:
    """
    Parses and evaluates `text`. Returns a `Failure` if it isn't a valid expression.

    Division is true division. Dividing by zero returns a `Failure` as well, but only for valid expressions.
    """
    tree = parse(expression, text)
    if isinstance(tree, Failure):
        return tree
    try:
        return compute(tree)
    except ZeroDivisionError:
        return Failure(text, "division by zero")

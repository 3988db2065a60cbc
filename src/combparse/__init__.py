"""
Parser combinators: small parsers that compose into recursive descent parsers for strings.

See the objects for more explanations.

See the `combparse.general` module for general purpose parsers you can use as examples,
and `combparse.expr` for a complete grammar.

Defining parsers:
```
digit = regular_expression(r"[0-9]")
number = map_(one_or_more(digit), lambda digits: int("".join(digits)))
pair = map_(sequence([number, ",", number]), lambda outputs: (outputs[0], outputs[2]))
```

Any callable taking the input and returning a `Success` or a `Failure` is a parser:
```
def foo(src: str) -> Success[int] | Failure:
    if src.startswith("foo"):
        return Success(10, src[3:])             # matched
    return Failure(src, "Fail reason here.")    # failed
```

Using parsers:
```
result = pair("1,2 rest")
if result:
    ... # `result` is a `Success` object, `result.remaining_input` is " rest"
else:
    ... # `result` is a `Failure` object

output = parse(pair, "1,2")     # the whole input must match
if isinstance(output, Failure):
    raise output.error("1,2")
```
"""

import combparse.const as const
import combparse.main
from combparse.main import (
    NOTHING,
    NothingType,
    Success,
    Failure,
    ParseError,
    Parser,
    AlwaysSucceedingParser,
    FactoryParameter,
    to_parser,
    parse,
    parse_or_raise,
    any_single_character,
    literal,
    nothing,
    regular_expression,
    as_,
    map_,
    transform_output,
    flat_map,
    lazy,
    one_of,
    sequence,
    zero_or_more,
    one_or_more,
    optional,
    but_not,
    lookahead_not,
)
import combparse.general as general

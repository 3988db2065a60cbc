"""
General use constants.
"""

from __future__ import annotations
from typing import Final

import string

WHITESPACES: Final[str] = " \t\n\r\f"
BINARY: Final[str] = "01"
OCTAL: Final[str] = string.octdigits
DECIMAL: Final[str] = string.digits
HEXADECIMAL: Final[str] = string.hexdigits
IDENTIFIER_START: Final[str] = string.ascii_letters + "_"
IDENTIFIER_CONTINUE: Final[str] = IDENTIFIER_START + DECIMAL

GENERAL_ESCAPES: Final[dict[str, str]] = {
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}
"""Escape sequences understood by `combparse.general.quoted_string`, without the backslash."""

"""Line classification for the fact file format.

Each non-blank, non-comment line holds one parenthesized triple in one of
four shapes. The shapes overlap (a term value and an integer value share
the same prefix), so they are tried in a fixed priority order and the
first full match wins:

1. ``(PRED ARG2 VALUE)`` where VALUE is a term or a one- or two-argument
   function call such as ``(TimeIntervalFn 10 20)``.
2. ``(PRED ARG2 ARG3 VALUE)`` with the same value grammar.
3. ``(PRED ARG2 INTEGER)``.
4. ``(PRED ARG2 "STRING")``.
"""

import re
from typing import Optional

from ..errors import FactSyntaxError
from ..interfaces import Fact, FactShape

COMMENT_PREFIX = ";"

# Building blocks shared with pattern users outside this module
TERM = r"[a-zA-Z_]\w*"
INT = r"-?\d+"
_ARG = rf"(?:{TERM}|{INT})"
UNARY_FN = rf"\({TERM}Fn {_ARG}\)"
BINARY_FN = rf"\({TERM}Fn {_ARG} {_ARG}\)"
_VALUE = rf"(?:{TERM}|{UNARY_FN}|{BINARY_FN})"

# re.ASCII keeps \w to [a-zA-Z0-9_]
SHAPE_ORDER: tuple[tuple[FactShape, re.Pattern], ...] = (
    (FactShape.TERM, re.compile(
        rf"\(({TERM}) ({TERM}) ({_VALUE})\)", re.ASCII)),
    (FactShape.TERM4, re.compile(
        rf"\(({TERM}) ({TERM}) ({TERM}) ({_VALUE})\)", re.ASCII)),
    (FactShape.INTEGER, re.compile(
        rf"\(({TERM}) ({TERM}) ({INT})\)", re.ASCII)),
    (FactShape.STRING, re.compile(
        rf'\(({TERM}) ({TERM}) (".*")\)', re.ASCII)),
)


def is_ignorable(line: str) -> bool:
    """Blank lines and ``;`` comments produce no fact."""
    return not line.strip() or line.startswith(COMMENT_PREFIX)


def classify_line(line: str) -> Optional[Fact]:
    """Classify one line of a fact file.

    Args:
        line: A single line, with or without its trailing newline.

    Returns:
        The parsed Fact, or None for blank and comment lines.

    Raises:
        FactSyntaxError: If the line matches none of the four shapes.
    """
    line = line.rstrip("\r\n")
    if is_ignorable(line):
        return None

    for shape, pattern in SHAPE_ORDER:
        match = pattern.fullmatch(line)
        if match is None:
            continue
        if shape is FactShape.TERM4:
            predicate, arg2, qualifier, value = match.groups()
        else:
            predicate, arg2, value = match.groups()
            qualifier = None
        return Fact(
            text=line,
            predicate=predicate,
            arg2=arg2,
            value=value,
            shape=shape,
            qualifier=qualifier,
        )

    raise FactSyntaxError(line)

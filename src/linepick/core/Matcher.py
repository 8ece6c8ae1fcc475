# linepick/core/Matcher.py
"""Matcher Module
================
Pure filtering of lines against a query under one of two matching modes.

- ``Mode.LITERAL``: case-sensitive substring containment.
- ``Mode.PATTERN``: the query is a Python regular expression, searched
  anywhere in the line (not anchored to the whole line).

The result always keeps the original relative order of the lines; nothing
is re-ranked. A query that does not compile as a pattern yields an empty
result instead of an error, so the user can keep typing toward a valid
expression.

Limits:
- Pattern mode runs on the backtracking `re` engine. A pathological query
  such as ``(a+)+$`` against a long run of ``a`` can take exponential time,
  and the single-threaded loop stays blocked until the search ends or the
  user interrupts it with Ctrl+C (which cancels the session).
"""

import logging
import re
from enum import Enum
from typing import Iterable, Optional, Pattern

from linepick.core.LineStore import Line


class Mode(Enum):
    """Matching semantics of the query."""

    LITERAL = "literal"
    PATTERN = "pattern"

    def toggled(self) -> "Mode":
        return Mode.PATTERN if self is Mode.LITERAL else Mode.LITERAL

    @property
    def label(self) -> str:
        return "regex" if self is Mode.PATTERN else "literal"

    @classmethod
    def parse(cls, name: str) -> "Mode":
        """Maps a config/CLI name to a Mode.

        Raises:
            ValueError: If *name* is not one of literal, pattern or regex.
        """
        key = str(name).strip().lower()
        if key in ("literal", "substring", "exact"):
            return cls.LITERAL
        if key in ("pattern", "regex", "regexp"):
            return cls.PATTERN
        raise ValueError(f"Unknown matching mode: {name!r}")


def compile_pattern(query: str) -> Optional[Pattern[str]]:
    """Compiles *query*, returning None when it is not a valid expression."""
    try:
        return re.compile(query)
    except re.error as e:
        logging.debug(f"Matcher: query {query!r} is not a valid pattern ({e}).")
        return None
    except (OverflowError, RecursionError) as e:
        # pathological inputs such as huge repeat counts
        logging.debug(f"Matcher: query {query!r} could not be compiled ({e!r}).")
        return None


def match(lines: Iterable[Line], query: str, mode: Mode) -> list[Line]:
    """Returns the lines matching *query* under *mode*, in original order."""
    if mode is Mode.LITERAL:
        return [line for line in lines if query in line.text]

    pattern = compile_pattern(query)
    if pattern is None:
        return []
    return [line for line in lines if pattern.search(line.text) is not None]

# src/linepick/core/__init__.py
"""Public facade for linepick.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (LineStore.py, Session.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .LineStore import Line, LineStore  # noqa: F401
from .Matcher import Mode, match  # noqa: F401
from .Selection import Selection, clamp  # noqa: F401
from .Session import Command, CommandKind, Session, SessionState  # noqa: F401


__all__ = [
    "Command",
    "CommandKind",
    "Line",
    "LineStore",
    "Mode",
    "Selection",
    "Session",
    "SessionState",
    "clamp",
    "match",
]

# linepick/core/Session.py
"""Session Module
================
This module holds the whole mutable state of one picking session and the
state machine that applies engine commands to it.

Key Features:
-------------
- `Command`: the closed set of engine commands produced by the key
  translator (append a character, remove the last one, move the cursor,
  toggle the matching mode, confirm, cancel, ignore).
- `Session`: owns the line store, the query, the mode, the filtered lines
  and the selection cursor. Every query or mode change recomputes the
  filtered set from scratch and then clamps the cursor.
- `SessionState`: ``RUNNING`` until a confirm or cancel moves the session to
  ``CONFIRMED`` or ``CANCELED``; after that commands are no longer applied.

The session is pure state: it neither draws nor reads keys, which keeps it
directly testable with plain command sequences.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from linepick.core.LineStore import Line, LineStore
from linepick.core.Matcher import Mode, match
from linepick.core.Selection import Selection


class CommandKind(Enum):
    APPEND_CHAR = "append_char"
    REMOVE_LAST_CHAR = "remove_last_char"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    TOGGLE_MODE = "toggle_mode"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    IGNORE = "ignore"


@dataclass(frozen=True)
class Command:
    """One engine command; `char` is only meaningful for APPEND_CHAR."""

    kind: CommandKind
    char: str = ""

    @classmethod
    def append(cls, char: str) -> "Command":
        return cls(CommandKind.APPEND_CHAR, char)

    def __repr__(self) -> str:
        if self.kind is CommandKind.APPEND_CHAR:
            return f"Command(append {self.char!r})"
        return f"Command({self.kind.value})"


REMOVE_LAST_CHAR = Command(CommandKind.REMOVE_LAST_CHAR)
MOVE_UP = Command(CommandKind.MOVE_UP)
MOVE_DOWN = Command(CommandKind.MOVE_DOWN)
TOGGLE_MODE = Command(CommandKind.TOGGLE_MODE)
CONFIRM = Command(CommandKind.CONFIRM)
CANCEL = Command(CommandKind.CANCEL)
IGNORE = Command(CommandKind.IGNORE)


class SessionState(Enum):
    RUNNING = "running"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


## ==================== Session Class ====================
class Session:
    """Class Session
    ===================
    State of one interactive run.

    Attributes:
        store (LineStore): Lines of the document; never mutated.
        mode (Mode): Current matching semantics.
        query (list[str]): Characters typed so far.
        filtered (list[Line]): Lines currently matching (query, mode).
        selection (Selection): Cursor into `filtered`.
        state (SessionState): RUNNING, CONFIRMED or CANCELED.
        outcome (Optional[Line]): The confirmed line, if any.

    Methods:
        apply(command) -> bool:
            Applies one command; returns True if anything visible changed.
        run_commands(commands) -> Optional[str]:
            Applies commands until the session ends; returns the outcome text.
    """

    def __init__(self, store: LineStore, mode: Mode = Mode.LITERAL) -> None:
        self.store = store
        self.mode = mode
        self.query: list[str] = []
        self.selection = Selection()
        self.filtered: list[Line] = list(store)
        self.state = SessionState.RUNNING
        self.outcome: Optional[Line] = None
        if mode is not Mode.LITERAL:
            self.refilter()

    @classmethod
    def from_text(cls, document: str, mode: Mode = Mode.LITERAL) -> "Session":
        return cls(LineStore(document), mode)

    @property
    def query_text(self) -> str:
        return "".join(self.query)

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def selected_line(self) -> Optional[Line]:
        return self.selection.current(self.filtered)

    @property
    def result(self) -> Optional[str]:
        """Text of the confirmed line; None when canceled or nothing matched."""
        return self.outcome.text if self.outcome is not None else None

    def refilter(self) -> None:
        """Recomputes the filtered set from scratch and clamps the cursor."""
        self.filtered = match(self.store, self.query_text, self.mode)
        self.selection.clamp(len(self.filtered))
        logging.debug(
            f"Session: {self.mode.label} query {self.query_text!r} matched "
            f"{len(self.filtered)}/{len(self.store)} lines, selection {self.selection.index}."
        )

    def apply(self, command: Command) -> bool:
        if not self.is_running:
            logging.warning(f"Session: {command!r} ignored, session already {self.state.value}.")
            return False

        kind = command.kind
        if kind is CommandKind.APPEND_CHAR:
            if not command.char:
                return False
            self.query.append(command.char)
            self.refilter()
            return True

        if kind is CommandKind.REMOVE_LAST_CHAR:
            if not self.query:
                return False
            self.query.pop()
            self.refilter()
            return True

        if kind is CommandKind.MOVE_UP:
            return self.selection.move_up()

        if kind is CommandKind.MOVE_DOWN:
            return self.selection.move_down(len(self.filtered))

        if kind is CommandKind.TOGGLE_MODE:
            self.mode = self.mode.toggled()
            self.refilter()
            return True

        if kind is CommandKind.CONFIRM:
            self.outcome = self.selected_line
            self.state = SessionState.CONFIRMED
            logging.info(
                "Session confirmed with %s.",
                f"line {self.outcome.index}" if self.outcome else "no line",
            )
            return True

        if kind is CommandKind.CANCEL:
            self.outcome = None
            self.state = SessionState.CANCELED
            logging.info("Session canceled.")
            return True

        return False

    def run_commands(self, commands: Iterable[Command]) -> Optional[str]:
        """Feeds *commands* until the session ends (or they run out)."""
        for command in commands:
            self.apply(command)
            if not self.is_running:
                break
        return self.result

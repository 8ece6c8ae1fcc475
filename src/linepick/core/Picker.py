# linepick/core/Picker.py
"""Picker Module
===============
This module provides the `Picker` class, the interaction loop of linepick.

Each iteration renders the current session, blocks for one key (the only
suspension point), translates it into a command and applies it. The loop
ends when the session is confirmed or canceled, and `run()` hands the
selected line's text (or None) back to the caller.

Everything runs on one thread; nothing happens between keys.
"""

import curses
import logging
from typing import Any, Optional

from linepick.core.Matcher import Mode
from linepick.core.Session import CANCEL, Session
from linepick.ui.DrawScreen import CursesSurface, DrawScreen, RenderSurface
from linepick.ui.KeyBinder import KeyBinder

logger = logging.getLogger("linepick")


## ==================== Picker Class ====================
class Picker:
    """Class Picker
    ===================
    Owns one `Session` and drives it with keys until it ends.

    Attributes:
        session (Session): Query, mode, filtered lines and selection.
        keybinder (KeyBinder): Reads keys and translates them to commands.
        drawer (DrawScreen): Lays out and draws each frame.
    """

    def __init__(
        self,
        session: Session,
        keybinder: KeyBinder,
        surface: RenderSurface,
        config: dict[str, Any],
    ) -> None:
        self.session = session
        self.keybinder = keybinder
        self.drawer = DrawScreen(surface, config)

    @classmethod
    def for_window(
        cls,
        stdscr: "curses.window",
        document: str,
        config: dict[str, Any],
        mode: Mode = Mode.LITERAL,
    ) -> "Picker":
        """Builds a picker reading keys from and drawing on *stdscr*."""
        try:
            curses.curs_set(1)
        except curses.error:
            pass  # cursor visibility is not supported everywhere
        stdscr.keypad(True)
        return cls(
            Session.from_text(document, mode),
            KeyBinder(stdscr, config),
            CursesSurface(stdscr, config),
            config,
        )

    def run(self) -> Optional[str]:
        """Runs the loop until confirm or cancel; returns the selected text."""
        logger.info(
            "Picker started: %d lines, %s mode.",
            len(self.session.store),
            self.session.mode.label,
        )
        try:
            while self.session.is_running:
                self.drawer.draw(self.session)
                key = self.keybinder.get_key_input()
                if key == curses.ERR:
                    continue
                self.session.apply(self.keybinder.translate(key))
        except KeyboardInterrupt:
            logger.info("Picker interrupted by KeyboardInterrupt.")
            self.session.apply(CANCEL)

        logger.info("Picker finished: %s.", self.session.state.value)
        return self.session.result

# linepick/ui/DrawScreen.py
"""DrawScreen.py
========================
Rendering of the picker: what goes where on the screen, and the curses
surface that puts it there.

It is responsible for:
- the prompt row (mode prompt, query, match counter),
- the filtered lines below it, with the selected row drawn as a full-width
  highlight bar,
- clipping to the window by display cells (wide Unicode via wcwidth),
- keeping the selected row inside the visible window when the filtered set
  is longer than the screen,
- terminal colours and double-buffered screen updates.

`DrawScreen` only talks to a `RenderSurface`; `CursesSurface` is the real
one, tests use an in-memory grid.
"""

import curses
import logging
from enum import Enum
from typing import Any, Protocol

from wcwidth import wcwidth

from linepick.core.Matcher import Mode
from linepick.core.Session import Session
from linepick.utils.utils import resolve_color


class Style(Enum):
    TEXT = "text"
    PROMPT = "prompt"
    QUERY = "query"
    COUNTER = "counter"
    SELECTED = "selected"


class RenderSurface(Protocol):
    """Character grid with styled cells, as consumed by `DrawScreen`."""

    def clear(self) -> None: ...

    def print(self, row: int, col: int, text: str, style: Style) -> None: ...

    def width(self) -> int: ...

    def height(self) -> int: ...

    def move_cursor(self, row: int, col: int) -> None: ...

    def present(self) -> None: ...


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    return w if w > 0 else (0 if w == 0 else 1)


def string_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def truncate_string(s: str, max_width: int) -> str:
    """Return `s` clipped to visual width `max_width`.

    A wide glyph that would straddle the limit is dropped entirely.
    """
    result: list[str] = []
    consumed = 0

    for ch in s:
        w = char_width(ch)
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w

    return "".join(result)


def sanitize(text: str, tab_size: int) -> str:
    """Expands tabs and replaces other control characters with '?'."""
    text = text.expandtabs(tab_size)
    return "".join(ch if ch.isprintable() else "?" for ch in text)


## ================= class CursesSurface ==============================
class CursesSurface:
    """`RenderSurface` over a curses window.

    Styles are resolved to curses attributes once, from the `[colors]`
    config section. Writes that fall outside the window are dropped, which
    is routine for the bottom-right cell.
    """

    PAIR_BASE = 1

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config = config
        self.attrs: dict[Style, int] = {}
        self._init_colors()

    def _init_colors(self) -> None:
        """Creates one colour pair per style from the config.

        Falls back to plain attributes (A_REVERSE for the selection) when
        the terminal has no colours or pair creation fails.
        """
        colors = self.config.get("colors", {})
        fallback = {
            Style.TEXT: curses.A_NORMAL,
            Style.PROMPT: curses.A_BOLD,
            Style.QUERY: curses.A_NORMAL,
            Style.COUNTER: curses.A_DIM,
            Style.SELECTED: curses.A_REVERSE,
        }

        try:
            has_colors = curses.has_colors()
        except curses.error:
            has_colors = False
        if not has_colors:
            logging.debug("Terminal has no colours; using plain attributes.")
            self.attrs = fallback
            return

        try:
            curses.start_color()
            curses.use_default_colors()  # allow -1 as the "default background"
        except curses.error:
            pass

        max_colors = curses.COLORS
        pairs = {
            Style.TEXT: (colors.get("text"), "default"),
            Style.PROMPT: (colors.get("prompt"), "default"),
            Style.QUERY: (colors.get("query"), "default"),
            Style.COUNTER: (colors.get("counter"), "default"),
            Style.SELECTED: (colors.get("selected_fg"), colors.get("selected_bg")),
        }
        try:
            for offset, (style, (fg_spec, bg_spec)) in enumerate(pairs.items()):
                pair_number = self.PAIR_BASE + offset
                fg = resolve_color(fg_spec, max_colors, fallback=curses.COLOR_WHITE)
                bg = resolve_color(bg_spec, max_colors, fallback=-1)
                curses.init_pair(pair_number, fg, bg)
                self.attrs[style] = curses.color_pair(pair_number)
        except curses.error as exc:
            logging.warning("init_pair failed (%s) – roll back to plain attributes", exc)
            self.attrs = fallback

    def clear(self) -> None:
        self.stdscr.erase()

    def print(self, row: int, col: int, text: str, style: Style) -> None:
        if not text:
            return
        try:
            self.stdscr.addstr(row, col, text, self.attrs.get(style, curses.A_NORMAL))
        except curses.error:
            pass  # drawing outside screen

    def width(self) -> int:
        return self.stdscr.getmaxyx()[1]

    def height(self) -> int:
        return self.stdscr.getmaxyx()[0]

    def move_cursor(self, row: int, col: int) -> None:
        try:
            self.stdscr.move(row, col)
        except curses.error as e:
            logging.debug(f"Curses error positioning cursor at ({row}, {col}): {e}")

    def present(self) -> None:
        """Flushes the frame with one noutrefresh()/doupdate() pair."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Computes the picker frame and draws it on a `RenderSurface`.

    Row 0 is the prompt line; rows 1..N show the filtered lines from
    `scroll_top` on, the selected one as a full-width highlight bar.

    Attributes:
        surface (RenderSurface): Where the frame is drawn.
        scroll_top (int): Index of the first filtered line on screen.
    """

    def __init__(self, surface: RenderSurface, config: dict[str, Any]) -> None:
        self.surface = surface
        picker_config = config.get("picker", {})
        self.prompts = {
            Mode.LITERAL: picker_config.get("prompt", "QUERY> "),
            Mode.PATTERN: picker_config.get("pattern_prompt", "REGEX> "),
        }
        self.show_counter = bool(picker_config.get("show_counter", True))
        self.tab_size = int(picker_config.get("tab_size", 4))
        self.scroll_top = 0

    def draw(self, session: Session) -> None:
        """Renders one full frame for the current session state."""
        self.surface.clear()
        height, width = self.surface.height(), self.surface.width()
        if height <= 0 or width <= 0:
            self.surface.present()
            return

        cursor_x = self._draw_prompt(session, width)
        self._draw_lines(session, height - 1, width)
        self.surface.move_cursor(0, min(cursor_x, width - 1))
        self.surface.present()

    def _draw_prompt(self, session: Session, width: int) -> int:
        """Draws row 0; returns the column just after the query."""
        prompt = truncate_string(sanitize(self.prompts[session.mode], self.tab_size), width)
        self.surface.print(0, 0, prompt, Style.PROMPT)
        x = string_width(prompt)

        counter = f" {len(session.filtered)}/{len(session.store)}" if self.show_counter else ""
        counter_w = string_width(counter)

        query = sanitize(session.query_text, self.tab_size)
        room = width - x
        if counter and x + string_width(query) + counter_w < width:
            self.surface.print(0, width - counter_w, counter, Style.COUNTER)
        query_w = string_width(query)
        if query_w > room:
            # keep the end of the query, which is where the user is typing
            query = query[::-1]
            query = truncate_string(query, max(0, room - 1))[::-1]
            query_w = string_width(query)
        self.surface.print(0, x, query, Style.QUERY)
        return x + query_w

    def _adjust_scroll(self, selection: int, total: int, visible: int) -> None:
        """Keeps `scroll_top` such that the selected row is on screen."""
        if visible <= 0 or total <= visible:
            self.scroll_top = 0
            return
        if selection < self.scroll_top:
            self.scroll_top = selection
        elif selection >= self.scroll_top + visible:
            self.scroll_top = selection - visible + 1
        self.scroll_top = max(0, min(self.scroll_top, total - visible))

    def _draw_lines(self, session: Session, visible: int, width: int) -> None:
        filtered = session.filtered
        selected = session.selection.index if filtered else -1
        self._adjust_scroll(max(0, selected), len(filtered), visible)

        window = filtered[self.scroll_top:self.scroll_top + max(0, visible)]
        for offset, line in enumerate(window):
            index = self.scroll_top + offset
            text = truncate_string(sanitize(line.text, self.tab_size), width)
            if index == selected:
                text += " " * (width - string_width(text))
                self.surface.print(offset + 1, 0, text, Style.SELECTED)
            else:
                self.surface.print(offset + 1, 0, text, Style.TEXT)


# tests/conftest.py
"""Pytest configuration with shared fixtures for the linepick tests.

Provides a pristine configuration, a mocked curses window, an in-memory
render surface and a key source that replays scripted keys.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable
from unittest.mock import MagicMock

import pytest

from linepick.ui.DrawScreen import Style
from linepick.utils.utils import DEFAULT_CONFIG


class FakeSurface:
    """In-memory `RenderSurface`: a grid of characters plus the style per row run."""

    def __init__(self, height: int = 10, width: int = 20) -> None:
        self._height = height
        self._width = width
        self.frames = 0
        self.cursor: tuple[int, int] | None = None
        self.clear()

    def clear(self) -> None:
        self.grid = [[" "] * self._width for _ in range(self._height)]
        self.runs: list[tuple[int, int, str, Style]] = []

    def print(self, row: int, col: int, text: str, style: Style) -> None:
        if not text:
            return
        self.runs.append((row, col, text, style))
        if not 0 <= row < self._height:
            return
        for offset, ch in enumerate(text):
            if 0 <= col + offset < self._width:
                self.grid[row][col + offset] = ch

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def move_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def present(self) -> None:
        self.frames += 1

    # ---- helpers for assertions ----
    def row_text(self, row: int) -> str:
        return "".join(self.grid[row]).rstrip()

    def styles_on_row(self, row: int) -> set[Style]:
        return {style for r, _c, _t, style in self.runs if r == row}


class ScriptedKeys:
    """Stands in for KeyBinder.get_key_input, replaying a fixed key list."""

    def __init__(self, keys: Iterable[Any]) -> None:
        self._keys = list(keys)

    def __call__(self, window: Any = None) -> Any:
        if not self._keys:
            raise AssertionError("picker asked for more keys than scripted")
        key = self._keys.pop(0)
        if isinstance(key, BaseException):
            raise key
        return key

    @property
    def remaining(self) -> int:
        return len(self._keys)


@pytest.fixture
def config() -> dict[str, Any]:
    """A deep copy of the embedded default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Mocked curses window with a 24x80 size."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface(height=6, width=20)


@pytest.fixture
def scripted_keys():
    """Factory fixture: ``scripted_keys(["a", 10])``."""
    return ScriptedKeys


@pytest.fixture
def surface_factory():
    """Factory fixture: ``surface_factory(height=4, width=12)``."""
    return FakeSurface

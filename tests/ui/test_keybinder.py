# tests/ui/test_keybinder.py
"""Unit tests for the `KeyBinder` class.
========================================

Covers the key -> command table, keybinding config parsing and the escape
sequence handling of `get_key_input`, using a mocked curses window.
"""

import curses
from unittest.mock import MagicMock

import pytest

from linepick.core.Session import (
    CANCEL,
    CONFIRM,
    IGNORE,
    MOVE_DOWN,
    MOVE_UP,
    REMOVE_LAST_CHAR,
    TOGGLE_MODE,
    Command,
)
from linepick.ui.KeyBinder import KeyBinder


@pytest.fixture
def keybinder(config) -> KeyBinder:
    return KeyBinder(None, config)


@pytest.mark.parametrize(
    "key, expected",
    [
        (27, CANCEL),
        (10, CONFIRM),
        (13, CONFIRM),
        (curses.KEY_ENTER, CONFIRM),
        (curses.KEY_BACKSPACE, REMOVE_LAST_CHAR),
        (127, REMOVE_LAST_CHAR),
        (8, REMOVE_LAST_CHAR),
        (curses.KEY_UP, MOVE_UP),
        (16, MOVE_UP),  # ctrl+p
        (curses.KEY_DOWN, MOVE_DOWN),
        (14, MOVE_DOWN),  # ctrl+n
        (18, TOGGLE_MODE),  # ctrl+r
        (curses.KEY_RESIZE, IGNORE),
        (curses.KEY_LEFT, IGNORE),
        (curses.KEY_F1, IGNORE),
        (1, IGNORE),  # ctrl+a
        ("alt-x", IGNORE),
        ("\x1b[99~", IGNORE),
    ],
)
def test_translate_fixed_and_default_keys(keybinder: KeyBinder, key, expected: Command) -> None:
    assert keybinder.translate(key) == expected


@pytest.mark.parametrize("char", ["a", "Z", " ", "(", "^", "é", "漢", "😀"])
def test_translate_printable_characters(keybinder: KeyBinder, char: str) -> None:
    assert keybinder.translate(char) == Command.append(char)


def test_translate_byte_codes_and_invisible_characters(keybinder: KeyBinder) -> None:
    assert keybinder.translate(ord("q")) == Command.append("q")
    assert keybinder.translate("\u200b") == IGNORE  # zero width space
    assert keybinder.translate("\u0301") == IGNORE  # combining accent


@pytest.mark.parametrize(
    "spec, code",
    [
        ("ctrl+r", 18),
        ("Ctrl+P", 16),
        ("esc", 27),
        ("enter", curses.KEY_ENTER),
        ("up", curses.KEY_UP),
        ("f2", curses.KEY_F2),
        ("ctrl+[", 27),
        ("shift+a", ord("A")),
        ("+", ord("+")),
        ("alt+x", "alt-x"),
        ("alt-j", "alt-j"),
        (7, 7),
    ],
)
def test_decode_keystring(keybinder: KeyBinder, spec, code) -> None:
    assert keybinder._decode_keystring(spec) == code


@pytest.mark.parametrize("spec", ["", "ctrl+", "hyper+x", "nosuchkey", "ctrl+f5", True, 1.5])
def test_decode_keystring_rejects_bad_specs(keybinder: KeyBinder, spec) -> None:
    with pytest.raises(ValueError):
        keybinder._decode_keystring(spec)


def test_user_keybindings_override_defaults(config) -> None:
    config["keybindings"] = {
        "toggle_mode": "ctrl+t|f2",
        "move_up": ["up", "ctrl+k", "bogus+key"],
        "move_down": [],
        "no_such_action": "ctrl+x",
    }
    kb = KeyBinder(None, config)

    assert kb.translate(20) == TOGGLE_MODE  # ctrl+t
    assert kb.translate(curses.KEY_F2) == TOGGLE_MODE
    assert kb.translate(18) == IGNORE  # ctrl+r no longer bound
    assert kb.translate(11) == MOVE_UP  # ctrl+k
    # unbinding the chord keeps the arrow key, which is always bound
    assert kb.translate(14) == IGNORE
    assert kb.translate(curses.KEY_DOWN) == MOVE_DOWN
    assert "move_down" not in kb.keybindings
    assert kb.lookup("ctrl+x") is None


def test_lookup(keybinder: KeyBinder) -> None:
    assert keybinder.lookup("ctrl+r") == "toggle_mode"
    assert keybinder.lookup("esc") == "cancel"
    assert keybinder.lookup("down") == "move_down"
    assert keybinder.lookup("f12") is None
    assert keybinder.lookup("not a key") is None


# --- get_key_input ------------------------------------------------------------

def window_with(keys) -> MagicMock:
    """Mock window whose get_wch() replays *keys* then raises curses.error."""
    window = MagicMock()
    remaining = list(keys)

    def get_wch():
        if not remaining:
            raise curses.error("no input")
        return remaining.pop(0)

    window.get_wch.side_effect = get_wch
    return window


def test_get_key_input_plain_keys(config) -> None:
    window = window_with(["x", "\n", curses.KEY_UP, "\x7f"])
    kb = KeyBinder(window, config)

    assert kb.get_key_input() == "x"
    assert kb.get_key_input() == 10
    assert kb.get_key_input() == curses.KEY_UP
    assert kb.get_key_input() == 127


def test_get_key_input_lone_escape(config) -> None:
    window = window_with(["\x1b"])
    kb = KeyBinder(window, config)

    assert kb.get_key_input() == 27
    window.nodelay.assert_any_call(True)
    window.nodelay.assert_called_with(False)


def test_get_key_input_escape_sequences(config) -> None:
    kb = KeyBinder(window_with(["\x1b", "[", "A"]), config)
    assert kb.get_key_input() == curses.KEY_UP

    kb = KeyBinder(window_with(["\x1b", "O", "B"]), config)
    assert kb.get_key_input() == curses.KEY_DOWN

    kb = KeyBinder(window_with(["\x1b", "x"]), config)
    assert kb.get_key_input() == "alt-x"

    kb = KeyBinder(window_with(["\x1b", "[", "9", "9", "~"]), config)
    assert kb.translate(kb.get_key_input()) == IGNORE


def test_get_key_input_reports_curses_error(config) -> None:
    kb = KeyBinder(window_with([]), config)
    assert kb.get_key_input() == curses.ERR


def test_get_key_input_without_window(keybinder: KeyBinder) -> None:
    with pytest.raises(RuntimeError):
        keybinder.get_key_input()


def test_printable_keys_bound_in_config_fire(config) -> None:
    """Bindings to printable keys win over appending them to the query."""
    config["keybindings"] = {
        "confirm": ["enter", "space"],
        "toggle_mode": ["ctrl+r", "shift+t"],
        "move_down": ["down", "/"],
    }
    kb = KeyBinder(None, config)

    assert kb.lookup("space") == "confirm"
    assert kb.translate(" ") == CONFIRM
    assert kb.translate(32) == CONFIRM
    assert kb.translate("T") == TOGGLE_MODE
    assert kb.translate("/") == MOVE_DOWN
    # unbound neighbours still type
    assert kb.translate("t") == Command.append("t")


def test_keybindings_that_are_not_a_table_are_ignored(config) -> None:
    config["keybindings"] = "ctrl+r"
    kb = KeyBinder(None, config)

    assert kb.translate(18) == TOGGLE_MODE
    assert kb.translate(27) == CANCEL

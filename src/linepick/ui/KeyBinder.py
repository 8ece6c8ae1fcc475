# linepick/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates raw terminal key events into picker engine
commands. Every key maps to exactly one `Command`; keys that mean nothing
to the picker map to `IGNORE`.

Key Features:
- Loads keybindings from the `[keybindings]` config section, with built-in
  defaults, supporting named keys, Ctrl chords and raw integer codes.
- Always treats Enter/Return, Escape, the arrow keys and the terminal's
  Backspace codes as the picker's fixed keys.
- Appends any other printable character (display width > 0) to the query.
- Reads keys wide-character aware and resolves ESC-prefixed CSI/SS3
  sequences that curses did not decode itself.

Main Methods:
1. translate: Maps one key event to a `Command`.
2. get_key_input: Blocks for one key or key sequence from the terminal.
3. lookup: Returns the command name bound to a key spec.
4. _load_keybindings / _decode_keystring / _setup_action_map: config parsing.
"""

import curses
import logging
import re
from typing import Optional

from wcwidth import wcswidth

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
from linepick.utils.logging_config import KEY_LOGGER

ESC = 27

# action name in the config -> command it produces
ACTION_COMMANDS: dict[str, Command] = {
    "cancel": CANCEL,
    "confirm": CONFIRM,
    "backspace": REMOVE_LAST_CHAR,
    "move_up": MOVE_UP,
    "move_down": MOVE_DOWN,
    "toggle_mode": TOGGLE_MODE,
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Event translator of the picker: raw key -> `Command`.

    Attributes:
        config: Picker configuration, including user-defined keybindings.
        stdscr: The curses window keys are read from.
        keybindings (dict): Action name -> list of decoded key codes.
        action_map (dict): Decoded key code -> `Command`.
    """
    # Keys do NOT include the leading ESC, get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        # Arrows (CSI and SS3)
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # Home/End (CSI/SS3 and tilde variants)
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end",

        # Insert/Delete/PageUp/PageDown
        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",

        # Keypad Enter in application mode
        "OM": "enter",
    }

    def __init__(self, stdscr: Optional["curses.window"], config: dict) -> None:
        self.stdscr = stdscr
        self.config = config
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Translate --------------------
    def translate(self, key: str | int) -> Command:
        """Maps one logical key event to exactly one engine command."""
        command = self.action_map.get(key)
        if command is None and isinstance(key, str) and len(key) == 1:
            # printable keys arrive from get_wch() as str, bindings are codes
            command = self.action_map.get(ord(key))
        if command is None:
            char = self._printable_character(key)
            command = Command.append(char) if char else IGNORE
        KEY_LOGGER.debug("key %r (%s) -> %r", key, type(key).__name__, command)
        return command

    @staticmethod
    def _printable_character(key: str | int) -> str:
        """Returns the character a key inserts, or "" if it is not printable."""
        if isinstance(key, int):
            # getch-style byte values; curses KEY_* codes start above 255
            if not 32 <= key < 256:
                return ""
            key = chr(key)
        if isinstance(key, str) and len(key) == 1 and wcswidth(key) > 0:
            return key
        return ""

    def _load_keybindings(self) -> dict[str, list[int | str]]:
        """Returns action name -> decoded key codes, defaults overlaid by config.

        A config entry may be a list, a single spec or a "a|b" string; an
        empty entry unbinds the action. Specs that do not parse are logged
        and skipped.
        """
        default_keybindings: dict[str, list[int | str]] = {
            "cancel": ["esc"],
            "confirm": ["enter"],
            "backspace": ["backspace"],
            "move_up": ["up", "ctrl+p"],
            "move_down": ["down", "ctrl+n"],
            "toggle_mode": ["ctrl+r"],
        }

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        if not isinstance(user_keybindings_config, dict):
            logging.error(
                "Ignoring [keybindings]: expected a table, got %r.", user_keybindings_config
            )
            user_keybindings_config = {}
        parsed_keybindings: dict[str, list[int | str]] = {}

        for action, default_value_spec in default_keybindings.items():
            spec: object = user_keybindings_config.get(action, default_value_spec)

            if not spec and spec != 0:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            if isinstance(spec, list):
                specs_to_process = spec
            elif isinstance(spec, str) and "|" in spec:
                specs_to_process = [s.strip() for s in spec.split("|")]
            else:
                specs_to_process = [spec]

            key_codes_for_action: list[int | str] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)  # type: ignore[arg-type]
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if key_codes_for_action:
                parsed_keybindings[action] = key_codes_for_action
            else:
                logging.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        unknown = set(user_keybindings_config) - set(default_keybindings)
        if unknown:
            logging.warning("Ignoring keybindings for unknown actions: %s", sorted(unknown))

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int | str:
        """Decodes a key spec ("ctrl+r", "up", "esc", "alt+x", 18) to a key code.

        Returns an int key code, or an "alt-<key>" string for Alt chords.

        Raises:
            ValueError: If the spec is empty, of the wrong type or unknown.
        """
        if isinstance(key_input, bool) or not isinstance(key_input, (str, int)):
            raise ValueError(
                f"Invalid key_input type: {type(key_input)}. Expected str or int."
            )
        if isinstance(key_input, int):
            return key_input

        original_key_string = key_input
        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        parts = [p.strip() for p in s.split("+")] if len(s) > 1 else [s]
        base_key_str = parts[-1]
        modifiers = set(parts[:-1])

        if "alt" in modifiers or s.startswith("alt-"):
            base = s[4:] if s.startswith("alt-") else base_key_str
            return f"alt-{base}"

        named_keys_map: dict[str, int] = {
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "home": curses.KEY_HOME,
            "end": getattr(curses, "KEY_END", curses.KEY_LL),
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "insert": curses.KEY_IC,
            "backspace": curses.KEY_BACKSPACE,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": ESC,
            "escape": ESC,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if not modifiers and base_key_str in named_keys_map:
            return named_keys_map[base_key_str]

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(
                f"Unknown base key '{base_key_str}' in '{original_key_string}'"
            )

        if "ctrl" in modifiers:
            modifiers.discard("ctrl")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z":
                base_code = ord(base_key_str) - ord("a") + 1
            elif base_key_str in ("[", "\\", "]", "^", "_"):
                base_code = ord(base_key_str) - 64  # ASCII control block
            elif base_key_str == "/":
                base_code = 31
            else:
                raise ValueError(f"No control code for '{original_key_string}'")

        if "shift" in modifiers:
            modifiers.discard("shift")
            if len(base_key_str) == 1 and base_code == ord(base_key_str):
                base_code = ord(base_key_str.upper())

        if modifiers:
            raise ValueError(
                f"Unknown or unhandled modifiers {sorted(modifiers)} in '{original_key_string}'"
            )
        return base_code

    def _setup_action_map(self) -> dict[int | str, Command]:
        """Builds decoded key -> command, fixed keys first, then keybindings."""
        final_key_action_map: dict[int | str, Command] = {
            curses.KEY_UP: MOVE_UP,
            curses.KEY_DOWN: MOVE_DOWN,
            curses.KEY_ENTER: CONFIRM,
            10: CONFIRM,  # LF
            13: CONFIRM,  # CR
            ESC: CANCEL,
            curses.KEY_BACKSPACE: REMOVE_LAST_CHAR,
            8: REMOVE_LAST_CHAR,  # ^H
            127: REMOVE_LAST_CHAR,  # DEL
            curses.KEY_RESIZE: IGNORE,
        }

        for action_name, key_code_list in self.keybindings.items():
            command = ACTION_COMMANDS[action_name]
            for key_code in key_code_list:
                existing = final_key_action_map.get(key_code)
                if existing is not None and existing != command:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key_code}) is overwriting "
                        f"an existing mapping to {existing!r}."
                    )
                final_key_action_map[key_code] = command

        logging.debug(f"Final constructed action map: {final_key_action_map}")
        return final_key_action_map

    @staticmethod
    def _normalize(key: str | int) -> str | int:
        """Control characters from get_wch() become their integer codes."""
        if isinstance(key, str) and len(key) == 1 and (ord(key) < 32 or ord(key) == 127):
            return ord(key)
        return key

    def get_key_input(self, window: Optional["curses.window"] = None) -> int | str:
        """Blocks for a single key or key sequence from the terminal.

        Returns:
            int | str:
            - curses key code (int) for known keys and control characters,
            - a one-character str for printable input,
            - "alt-<char>" for Alt/Meta chords,
            - 27 for a lone ESC,
            - the raw ESC-prefixed str for an unknown escape sequence,
            - curses.ERR when curses reports an error (e.g. interrupted read).
        """
        target = window or self.stdscr
        if target is None:
            raise RuntimeError("KeyBinder has no window to read keys from.")

        try:
            key = self._normalize(target.get_wch())
        except curses.error:
            return curses.ERR
        if key != ESC:
            return key

        # ESC received: lone ESC, Alt chord, or an escape sequence
        seq = ""
        target.nodelay(True)
        try:
            while True:
                try:
                    nx = target.get_wch()
                except curses.error:
                    break
                seq += nx if isinstance(nx, str) else f"<{nx}>"
        finally:
            target.nodelay(False)

        if not seq:
            logging.debug("get_key_input: standalone ESC")
            return ESC

        if seq[0] == "\x1b":
            seq = seq[1:]

        if len(seq) == 1 and seq.isprintable():
            alt_key = f"alt-{seq.lower()}"
            logging.debug("get_key_input: Alt chord -> %r", alt_key)
            return alt_key

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

        if mapped:
            code = self._decode_keystring(mapped)
            logging.debug("get_key_input: ESC %r -> %r -> code %r", seq, mapped, code)
            return code

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return "\x1b" + seq

    def lookup(self, key_spec: str | int) -> Optional[str]:
        """Finds the action name bound to a key spec, or None."""
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None

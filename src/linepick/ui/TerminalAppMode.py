# linepick/ui/TerminalAppMode.py
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

TTY_PATH = "/dev/tty"


class TerminalAppMode:
    """
    Give curses a real terminal even when the picker sits in a pipeline.

    - stdin redirected (``cmd | linepick``): the document has already been
      read from it, so the controlling terminal is put on fd 0 for keys.
    - stdout redirected (``x=$(linepick file)``): the controlling terminal is
      put on fd 1 for drawing; the original stdout is kept aside so the
      selected line still goes to the caller.

    Always pair `enter()` with `exit()` (try/finally) or use it as a context
    manager. Raises OSError from `enter()` when no terminal is available.
    """

    def __init__(self, tty_path: str = TTY_PATH) -> None:
        self.tty_path = tty_path
        self._entered: bool = False
        self._tty_fd: Optional[int] = None
        self._saved: dict[int, int] = {}

    def __enter__(self) -> "TerminalAppMode":
        self.enter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit()

    def _needs_tty(self) -> list[int]:
        fds = []
        for fd in (0, 1):
            try:
                if not os.isatty(fd):
                    fds.append(fd)
            except OSError:
                fds.append(fd)
        return fds

    def enter(self) -> None:
        fds = self._needs_tty()
        if not fds:
            self._entered = True
            return

        sys.stdout.flush()
        self._tty_fd = os.open(self.tty_path, os.O_RDWR)
        try:
            for fd in fds:
                self._saved[fd] = os.dup(fd)
                os.dup2(self._tty_fd, fd)
        except OSError:
            self._restore()
            raise

        self._entered = True
        logging.debug("TerminalAppMode: attached %s to fds %s.", self.tty_path, fds)

    def exit(self) -> None:
        if not self._entered:
            return
        self._restore()
        self._entered = False
        logging.debug("TerminalAppMode: exited (restored redirected fds).")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _restore(self) -> None:
        if 1 in self._saved:
            try:
                sys.stdout.flush()
            except (OSError, ValueError):
                pass
        for fd, saved in self._saved.items():
            try:
                os.dup2(saved, fd)
            finally:
                os.close(saved)
        self._saved.clear()
        if self._tty_fd is not None:
            os.close(self._tty_fd)
            self._tty_fd = None

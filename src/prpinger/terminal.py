"""Terminal input: window focus reporting and status item activation.

Terminals that support xterm focus reporting send ``ESC [ I`` when the window
gains focus and ``ESC [ O`` when it loses it, once ``ESC [ ? 1004 h`` is
written. Enter (or ``o``) activates the status item.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import time
from typing import Any, Callable, List, Optional, TextIO

logger = logging.getLogger(__name__)

FOCUS_IN = "\x1b[I"
FOCUS_OUT = "\x1b[O"
ENABLE_FOCUS_REPORTING = "\x1b[?1004h"
DISABLE_FOCUS_REPORTING = "\x1b[?1004l"

EVENT_FOCUS_IN = "focus-in"
EVENT_FOCUS_OUT = "focus-out"
EVENT_ACTIVATE = "activate"

_ACTIVATE_KEYS = {"\r", "\n", "o"}


def parse_terminal_events(data: str) -> List[str]:
    """Translate raw terminal input into focus and activation events."""
    events: List[str] = []
    index = 0
    while index < len(data):
        if data.startswith(FOCUS_IN, index):
            events.append(EVENT_FOCUS_IN)
            index += len(FOCUS_IN)
            continue
        if data.startswith(FOCUS_OUT, index):
            events.append(EVENT_FOCUS_OUT)
            index += len(FOCUS_OUT)
            continue
        if data[index] in _ACTIVATE_KEYS:
            events.append(EVENT_ACTIVATE)
        index += 1
    return events


class TerminalInput:
    """Waits for timer deadlines while dispatching terminal input events.

    Use as a context manager; outside a TTY it degrades to ``time.sleep``.
    """

    def __init__(
        self,
        on_focus_change: Callable[[bool], None],
        on_activate: Callable[[], None],
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self._on_focus_change = on_focus_change
        self._on_activate = on_activate
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._saved_attributes: Optional[Any] = None
        self._interactive = False

    def __enter__(self) -> "TerminalInput":
        self._interactive = self._stdin.isatty() and self._stdout.isatty()
        if not self._interactive:
            return self

        import termios
        import tty

        fd = self._stdin.fileno()
        self._saved_attributes = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._stdout.write(ENABLE_FOCUS_REPORTING)
        self._stdout.flush()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._interactive:
            return

        import termios

        self._stdout.write(DISABLE_FOCUS_REPORTING + "\n")
        self._stdout.flush()
        if self._saved_attributes is not None:
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_attributes)

    def dispatch(self, data: str) -> None:
        for event in parse_terminal_events(data):
            if event == EVENT_FOCUS_IN:
                self._on_focus_change(True)
            elif event == EVENT_FOCUS_OUT:
                self._on_focus_change(False)
            else:
                self._on_activate()

    def wait(self, timeout: float) -> None:
        """Block for up to ``timeout`` seconds, returning early on input."""
        if not self._interactive:
            time.sleep(timeout)
            return

        fd = self._stdin.fileno()
        readable, _, _ = select.select([fd], [], [], max(0.0, timeout))
        if not readable:
            return

        data = os.read(fd, 1024).decode("utf-8", errors="ignore")
        logger.debug("Terminal input", extra={"bytes": len(data)})
        self.dispatch(data)

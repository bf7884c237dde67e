"""Status indicator surface showing the nudged pull request."""

from __future__ import annotations

import re
import sys
from typing import Optional, TextIO

from .models import Command, Tooltip

WARNING_BACKGROUND = "statusBarItem.warningBackground"

_ICONS = {"heart-filled": "♥"}
_ICON_REFERENCE = re.compile(r"\$\(([a-z0-9-]+)\)")
_MARKDOWN_LINK = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")

_CLEAR_LINE = "\r\x1b[2K"
_WARNING_STYLE = "\x1b[30;43m"
_RESET_STYLE = "\x1b[0m"


class StatusItem:
    """A single persistent status indicator.

    Holds text, tooltip, command and background color; ``show`` and ``hide``
    toggle visibility. Subclasses render the state somewhere visible.
    """

    def __init__(self) -> None:
        self.text = ""
        self.tooltip: Optional[Tooltip] = None
        self.command: Optional[Command] = None
        self.background_color: Optional[str] = None
        self.visible = False

    def show(self) -> None:
        self.visible = True
        self._render()

    def hide(self) -> None:
        self.visible = False
        self._render()

    def format_line(self) -> str:
        line = self.text
        if self.tooltip is not None:
            line = f"{line}  {render_plain_text(self.tooltip.markdown, self.tooltip.support_theme_icons)}"
        return line

    def _render(self) -> None:
        """Hook for subclasses; the base item only keeps state."""


def render_plain_text(markdown: str, support_theme_icons: bool = True) -> str:
    """Flatten tooltip markdown into a single line of terminal text."""
    text = _MARKDOWN_LINK.sub(lambda match: f"{match.group(1)} <{match.group(2)}>", markdown)
    if support_theme_icons:
        text = _ICON_REFERENCE.sub(lambda match: _ICONS.get(match.group(1), ""), text)
    return text


class TerminalStatusItem(StatusItem):
    """Renders the status item as one rewritable line on a terminal stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self._stream = stream or sys.stdout

    def _render(self) -> None:
        interactive = self._stream.isatty()
        if not interactive:
            if self.visible:
                self._stream.write(self.format_line() + "\n")
                self._stream.flush()
            return

        output = _CLEAR_LINE
        if self.visible:
            line = self.format_line()
            if self.background_color == WARNING_BACKGROUND:
                line = f"{_WARNING_STYLE}{line}{_RESET_STYLE}"
            output += line
        self._stream.write(output)
        self._stream.flush()

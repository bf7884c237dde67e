"""Tests for status item rendering."""

import io
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prpinger.models import Tooltip
from prpinger.status import WARNING_BACKGROUND, TerminalStatusItem, render_plain_text


class _TtyStream(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_render_plain_text_flattens_links_and_icons():
    """Verify markdown links and theme icons become plain terminal text."""
    text = render_plain_text("[Fix crash](https://example.com/1) needs your review. Thanks $(heart-filled)")

    assert text == "Fix crash <https://example.com/1> needs your review. Thanks ♥"


def test_render_plain_text_keeps_icons_when_unsupported():
    """Verify icon references are left alone when theme icons are off."""
    assert render_plain_text("Thanks $(heart-filled)", support_theme_icons=False) == "Thanks $(heart-filled)"


def test_terminal_status_item_writes_line_when_shown():
    """Verify a non-interactive stream receives one line per show and nothing on hide."""
    stream = io.StringIO()
    item = TerminalStatusItem(stream)
    item.text = "Fx"
    item.tooltip = Tooltip("[Fix](https://example.com/1) needs your review.", True)

    item.show()
    item.hide()

    assert stream.getvalue() == "Fx  Fix <https://example.com/1> needs your review.\n"


def test_terminal_status_item_highlights_warning_on_tty():
    """Verify the warning background is rendered with ANSI styling on a TTY."""
    stream = _TtyStream()
    item = TerminalStatusItem(stream)
    item.text = "#7"
    item.background_color = WARNING_BACKGROUND

    item.show()

    assert stream.getvalue() == "\r\x1b[2K\x1b[30;43m#7\x1b[0m"


def test_terminal_status_item_clears_line_on_hide_on_tty():
    """Verify hiding clears the status line on a TTY."""
    stream = _TtyStream()
    item = TerminalStatusItem(stream)

    item.hide()

    assert stream.getvalue() == "\r\x1b[2K"

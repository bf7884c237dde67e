"""Status label and tooltip rendering for a nudged pull request."""

from __future__ import annotations

import re

from .models import PullRequestSummary, Tooltip

NOT_LOGGED_IN_LABEL = "Not Logged In"

_STOP_CHARACTERS = frozenset("`.:")
_VOWELS = frozenset("aeiou")
_WORD_CHARACTER = re.compile(r"\w", re.ASCII)
_MAX_KEPT = 15
_MIN_KEPT_BEFORE_WORD_BREAK = 8


def shorten_title(title: str) -> str:
    """Compress a title into a short consonant-heavy abbreviation.

    The result never exceeds fifteen characters; the length check runs before
    each character is considered, so a sixteenth is never appended.

    >>> shorten_title("Fix: crash on startup")
    'Fx'
    """
    kept = []
    for ch in title:
        if ch in _STOP_CHARACTERS:
            break
        if len(kept) > _MIN_KEPT_BEFORE_WORD_BREAK and not _WORD_CHARACTER.match(ch):
            break
        if len(kept) >= _MAX_KEPT:
            break
        if ch not in _VOWELS:
            kept.append(ch)
    return "".join(kept)


def make_label(pr: PullRequestSummary, style: str = "short") -> str:
    """Render the status label for ``pr`` in the configured presentation style."""
    if style == "number":
        return f"#{pr.number}"
    return shorten_title(pr.title)


def make_tooltip(pr: PullRequestSummary) -> Tooltip:
    return Tooltip(
        markdown=f"[{pr.title}]({pr.url}) needs your review. Thanks $(heart-filled)",
        support_theme_icons=True,
    )

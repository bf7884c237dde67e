"""Domain models for the pull request review notifier.

These dataclasses intentionally model only the subset of GraphQL payload fields
that are required to decide whether a pull request needs team review.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Session:
    """An authenticated GitHub session held in memory only."""

    access_token: str
    account_label: str

    def __repr__(self) -> str:
        return f"Session(account_label={self.account_label!r})"


@dataclass(frozen=True, slots=True)
class PullRequestSummary:
    """Snapshot of one open pull request as returned by a single poll."""

    number: int
    author_login: str
    author_association: str
    is_draft: bool
    review_request_count: int
    review_count: int
    assignee_logins: Tuple[str, ...] = field(default_factory=tuple)
    title: str = ""
    url: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Tooltip:
    """Markdown tooltip text, optionally containing ``$(icon)`` references."""

    markdown: str
    support_theme_icons: bool = False


@dataclass(frozen=True, slots=True)
class Command:
    """A named notifier command plus the arguments it is invoked with."""

    name: str
    arguments: Tuple[object, ...] = ()

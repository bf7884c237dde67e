"""Configuration parsing and validation for the pull request review notifier."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

PRESENTATION_STYLES = ("short", "number")

_FALSE_VALUES = {"0", "false", "no", "off"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the notifier."""

    owner: str
    repo: str
    presentation: str = "short"
    require_self_assignment: bool = True
    poll_interval_seconds: int = 60 * 10
    revalidate_interval_seconds: int = 20
    away_threshold_seconds: int = 60 * 5
    max_age_days: int = 4
    batch_size: int = 30
    nudge_divisor: int = 7


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment flag, raising on unrecognized values."""
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid value for '{name}': expected one of "
        f"{sorted(_TRUE_VALUES | _FALSE_VALUES)}, got '{raw}'."
    )


def load_config(
    owner: Optional[str] = None,
    repo: Optional[str] = None,
    presentation: Optional[str] = None,
    require_self_assignment: Optional[bool] = None,
) -> Config:
    """Build and validate application configuration.

    Explicit arguments (usually from the command line) take precedence over the
    ``PRPINGER_*`` environment variables, which take precedence over defaults.

    Args:
        owner: GitHub organization or user owning the watched repository.
        repo: Name of the watched repository.
        presentation: Status label style, ``"short"`` or ``"number"``.
        require_self_assignment: Whether a pull request must be assigned to its
            own author (the bot-assignment convention) to need team review.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any value is empty or not one of the allowed choices.
    """
    owner = (owner or os.getenv("PRPINGER_OWNER", "") or "microsoft").strip()
    repo = (repo or os.getenv("PRPINGER_REPO", "") or "vscode").strip()
    presentation = (presentation or os.getenv("PRPINGER_PRESENTATION", "") or "short").strip().lower()

    if not owner or not repo:
        raise ConfigurationError("Invalid repository: both owner and repo name must be non-empty.")

    if "/" in owner or "/" in repo:
        raise ConfigurationError(
            f"Invalid repository '{owner}/{repo}': pass owner and repo name separately."
        )

    if presentation not in PRESENTATION_STYLES:
        raise ConfigurationError(
            f"Invalid value for 'presentation': expected one of {PRESENTATION_STYLES}, "
            f"got '{presentation}'."
        )

    if require_self_assignment is None:
        require_self_assignment = _env_flag("PRPINGER_REQUIRE_SELF_ASSIGNMENT", True)

    return Config(
        owner=owner,
        repo=repo,
        presentation=presentation,
        require_self_assignment=require_self_assignment,
    )

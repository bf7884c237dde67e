"""Command-line argument parsing for the pull request review notifier."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import PRESENTATION_STYLES


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the notifier.

    Returns:
        Parsed CLI arguments. Unset repository and presentation options are
        ``None`` so environment variables and defaults can apply.
    """
    parser = argparse.ArgumentParser(
        prog="prpinger",
        description=(
            "Nudge about one open GitHub pull request that still needs a first "
            "review from the team."
        ),
    )

    parser.add_argument(
        "--owner",
        default=None,
        help="GitHub organization or user that owns the repository (default: microsoft).",
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="GitHub repository name to watch (default: vscode).",
    )
    parser.add_argument(
        "--presentation",
        choices=PRESENTATION_STYLES,
        default=None,
        help="Status label style: abbreviated title or pull request number (default: short).",
    )
    parser.add_argument(
        "--no-require-self-assignment",
        dest="require_self_assignment",
        action="store_false",
        default=None,
        help="Do not require the pull request to be assigned to its own author.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll a single time, print the selected pull request and exit.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log poll activity to stderr.",
    )

    return parser.parse_args(argv)

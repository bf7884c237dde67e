"""Tests for command-line argument parsing."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prpinger.cli import parse_args


def test_parse_args_with_valid_arguments(monkeypatch):
    """Verify CLI parsing succeeds when all options are provided."""
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "prpinger",
            "--owner",
            "my-org",
            "--repo",
            "my-repo",
            "--presentation",
            "number",
            "--no-require-self-assignment",
            "--once",
            "--verbose",
        ],
    )

    args = parse_args()

    assert args.owner == "my-org"
    assert args.repo == "my-repo"
    assert args.presentation == "number"
    assert args.require_self_assignment is False
    assert args.once is True
    assert args.verbose is True


def test_parse_args_without_options_leaves_config_unset(monkeypatch):
    """Verify omitted options are None so environment defaults can apply."""
    monkeypatch.setattr(sys, "argv", ["prpinger"])

    args = parse_args()

    assert args.owner is None
    assert args.repo is None
    assert args.presentation is None
    assert args.require_self_assignment is None
    assert args.once is False
    assert args.verbose is False


def test_parse_args_accepts_explicit_argv():
    """Verify an explicit argument list is parsed instead of sys.argv."""
    args = parse_args(["--presentation", "short"])

    assert args.presentation == "short"


def test_parse_args_with_unknown_presentation_fails_validation(monkeypatch):
    """Verify CLI parsing exits with an error for an unknown presentation style."""
    monkeypatch.setattr(sys, "argv", ["prpinger", "--presentation", "long"])

    with pytest.raises(SystemExit):
        parse_args()

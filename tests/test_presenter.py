"""Tests for displaying and retracting a nudged pull request."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prpinger.config import Config
from prpinger.errors import ApiError
from prpinger.models import PullRequestSummary, Session
from prpinger.presenter import PROMPT_LOGIN_COMMAND, SHOW_COMMAND, Presenter
from prpinger.status import WARNING_BACKGROUND, StatusItem
from prpinger.timers import EventLoop


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def _make_pr(number: int = 12, review_count: int = 0) -> PullRequestSummary:
    return PullRequestSummary(
        number=number,
        author_login="alice",
        author_association="MEMBER",
        is_draft=False,
        review_request_count=0,
        review_count=review_count,
        assignee_logins=("alice",),
        title="Fix: crash on startup",
        url=f"https://github.com/microsoft/vscode/pull/{number}",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _build(presentation: str = "short"):
    clock = _FakeClock()
    loop = EventLoop(timefunc=clock.time, delayfunc=clock.sleep)
    client = Mock()
    client.get_pull_request.return_value = _make_pr()
    item = StatusItem()
    open_external = Mock()
    presenter = Presenter(
        config=Config(owner="microsoft", repo="vscode", presentation=presentation),
        client=client,
        item=item,
        loop=loop,
        get_session=lambda: Session(access_token="token", account_label="me"),
        open_external=open_external,
    )
    return presenter, loop, client, item, open_external


def test_show_not_logged_in_prompts_login():
    """Verify the logged-out state shows a fixed label bound to the login command."""
    presenter, _, _, item, _ = _build()

    presenter.show_not_logged_in()

    assert item.text == "Not Logged In"
    assert item.command.name == PROMPT_LOGIN_COMMAND
    assert item.visible is True


def test_display_renders_label_tooltip_and_command():
    """Verify a displayed pull request sets every status item field."""
    presenter, _, _, item, _ = _build()
    pr = _make_pr()

    presenter.display(pr, forced=False)

    assert item.text == "Fx"
    assert "needs your review" in item.tooltip.markdown
    assert item.command.name == SHOW_COMMAND
    assert item.command.arguments == (pr,)
    assert item.background_color is None
    assert item.visible is True
    assert presenter.is_displaying is True


def test_display_number_presentation_and_forced_warning_background():
    """Verify number labels and the warning background for forced displays."""
    presenter, _, _, item, _ = _build(presentation="number")

    presenter.display(_make_pr(number=99), forced=True)

    assert item.text == "#99"
    assert item.background_color == WARNING_BACKGROUND


def test_display_while_displaying_raises():
    """Verify a second display cannot replace the active one."""
    presenter, _, _, _, _ = _build()
    presenter.display(_make_pr(number=1), forced=False)

    with pytest.raises(RuntimeError):
        presenter.display(_make_pr(number=2), forced=False)


def test_revalidation_keeps_display_while_review_is_still_needed():
    """Verify the display stays while the pull request still needs review."""
    presenter, loop, client, item, _ = _build()
    presenter.display(_make_pr(), forced=False)

    loop.run_until(65)

    assert client.get_pull_request.call_count == 3
    client.get_pull_request.assert_called_with("token", 12)
    assert presenter.is_displaying is True
    assert item.visible is True


def test_revalidation_retracts_reviewed_pull_request_exactly_once():
    """Verify a reviewed pull request stops the timer, clears the marker and hides the item."""
    presenter, loop, client, item, _ = _build()
    display = presenter.display(_make_pr(), forced=False)
    client.get_pull_request.return_value = _make_pr(review_count=1)

    with patch.object(item, "hide", wraps=item.hide) as hide_mock:
        loop.run_until(100)
        display.dispose()

    assert client.get_pull_request.call_count == 1
    hide_mock.assert_called_once_with()
    assert display.disposed is True
    assert presenter.current is None
    assert item.visible is False
    assert loop.pending == 0


def test_revalidation_retracts_pull_request_that_no_longer_exists():
    """Verify a pull request that disappeared is retracted."""
    presenter, loop, client, _, _ = _build()
    presenter.display(_make_pr(), forced=False)
    client.get_pull_request.return_value = None

    loop.run_until(20)

    assert presenter.is_displaying is False


def test_revalidation_failure_is_swallowed_and_retried():
    """Verify API failures during re-validation keep the display and retry later."""
    presenter, loop, client, _, _ = _build()
    presenter.display(_make_pr(), forced=False)
    client.get_pull_request.side_effect = [ApiError("boom"), _make_pr(review_count=1)]

    loop.run_until(20)
    assert presenter.is_displaying is True

    loop.run_until(40)
    assert presenter.is_displaying is False


def test_open_pull_request_opens_url_and_hides_but_keeps_display():
    """Verify the show action opens the URL and hides the item without ending the display."""
    presenter, _, _, item, open_external = _build()
    pr = _make_pr()
    presenter.display(pr, forced=False)

    presenter.open_pull_request(pr)

    open_external.assert_called_once_with(pr.url)
    assert item.visible is False
    assert presenter.is_displaying is True


def test_dispose_cancels_revalidation():
    """Verify presenter disposal leaves no timers behind."""
    presenter, loop, client, _, _ = _build()
    presenter.display(_make_pr(), forced=False)

    presenter.dispose()
    loop.run_until(100)

    client.get_pull_request.assert_not_called()
    assert loop.pending == 0


def test_retracted_display_leaves_nothing_to_activate():
    """Verify a retracted display clears its command so it cannot be opened."""
    presenter, loop, client, item, _ = _build()
    presenter.display(_make_pr(), forced=True)
    client.get_pull_request.return_value = None

    loop.run_until(25)

    assert presenter.is_displaying is False
    assert item.command is None
    assert presenter.active_command() is None


def test_hidden_item_has_no_active_command():
    """Verify a hidden item cannot be activated even while its display is active."""
    presenter, _, _, item, _ = _build()
    pr = _make_pr()
    presenter.display(pr, forced=False)
    assert presenter.active_command() == item.command

    presenter.open_pull_request(pr)

    assert presenter.active_command() is None


def test_clear_not_logged_in_hides_login_prompt_only():
    """Verify the login prompt is hidden without touching a displayed pull request."""
    presenter, _, _, item, _ = _build()
    presenter.show_not_logged_in()

    presenter.clear_not_logged_in()

    assert item.visible is False
    assert item.command is None

    presenter.display(_make_pr(), forced=False)
    presenter.clear_not_logged_in()

    assert item.visible is True
    assert item.command.name == SHOW_COMMAND

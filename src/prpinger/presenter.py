"""Presents the nudged pull request and retracts it once it has been picked up."""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable, Optional

from .config import Config
from .errors import PrPingerError
from .github_client import GitHubClient
from .labels import NOT_LOGGED_IN_LABEL, make_label, make_tooltip
from .models import Command, PullRequestSummary, Session
from .selector import needs_team_review
from .status import WARNING_BACKGROUND, StatusItem
from .timers import EventLoop, RepeatingTimer

logger = logging.getLogger(__name__)

PROMPT_LOGIN_COMMAND = "prompt_login"
SHOW_COMMAND = "show"


class DisplayState:
    """The pull request currently on display and its re-validation timer.

    ``dispose`` is the only teardown path and runs its effects exactly once.
    """

    def __init__(
        self,
        pr: PullRequestSummary,
        forced: bool,
        loop: EventLoop,
        interval_seconds: float,
        check: Callable[["DisplayState"], None],
        on_dispose: Callable[["DisplayState"], None],
    ) -> None:
        self.pr = pr
        self.forced = forced
        self._on_dispose = on_dispose
        self._disposed = False
        self._timer: RepeatingTimer = loop.every(interval_seconds, lambda: check(self))

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._timer.cancel()
        self._on_dispose(self)


class Presenter:
    """Owns the status item and the single active ``DisplayState``."""

    def __init__(
        self,
        config: Config,
        client: GitHubClient,
        item: StatusItem,
        loop: EventLoop,
        get_session: Callable[[], Optional[Session]],
        open_external: Callable[[str], object] = webbrowser.open,
    ) -> None:
        self._config = config
        self._client = client
        self._item = item
        self._loop = loop
        self._get_session = get_session
        self._open_external = open_external
        self._current: Optional[DisplayState] = None

    @property
    def current(self) -> Optional[DisplayState]:
        return self._current

    @property
    def is_displaying(self) -> bool:
        return self._current is not None

    def show_not_logged_in(self) -> None:
        self._item.text = NOT_LOGGED_IN_LABEL
        self._item.tooltip = None
        self._item.command = Command(PROMPT_LOGIN_COMMAND)
        self._item.background_color = None
        self._item.show()

    def clear_not_logged_in(self) -> None:
        """Hide the login prompt once a session is held."""
        if self._item.command == Command(PROMPT_LOGIN_COMMAND):
            self._item.command = None
            self._item.hide()

    def active_command(self) -> Optional[Command]:
        """Return the command a click would run, or None while the item is hidden."""
        if not self._item.visible:
            return None
        return self._item.command

    def display(self, pr: PullRequestSummary, forced: bool) -> DisplayState:
        """Show ``pr`` and start re-validating it.

        Raises:
            RuntimeError: If another pull request is already on display.
        """
        if self._current is not None:
            raise RuntimeError(f"Pull request #{self._current.pr.number} is already on display.")

        self._item.text = make_label(pr, self._config.presentation)
        self._item.tooltip = make_tooltip(pr)
        self._item.command = Command(SHOW_COMMAND, (pr,))
        self._item.background_color = WARNING_BACKGROUND if forced else None
        self._item.show()

        display = DisplayState(
            pr,
            forced,
            self._loop,
            self._config.revalidate_interval_seconds,
            self._revalidate,
            self._on_dispose,
        )
        self._current = display

        logger.info("Displaying pull request", extra={"pr_number": pr.number, "forced": forced})
        return display

    def _on_dispose(self, display: DisplayState) -> None:
        if self._current is display:
            self._current = None
        self._item.command = None
        self._item.hide()
        logger.info("Retracted pull request", extra={"pr_number": display.pr.number})

    def _revalidate(self, display: DisplayState) -> None:
        """Re-fetch the displayed pull request and retract it once reviewed."""
        if display.disposed:
            return

        session = self._get_session()
        if session is None:
            return

        try:
            latest = self._client.get_pull_request(session.access_token, display.pr.number)
        except PrPingerError as exc:
            logger.warning(
                "Re-validation failed; retrying next interval",
                extra={"pr_number": display.pr.number, "error": str(exc)},
            )
            return

        if latest is None or not needs_team_review(latest, self._config.require_self_assignment):
            display.dispose()

    def open_pull_request(self, pr: PullRequestSummary) -> None:
        """Open ``pr`` in the default browser and hide the status item.

        The display stays active until re-validation retracts it, so no other
        pull request is nudged in the meantime.
        """
        self._open_external(pr.url)
        self._item.hide()

    def dispose(self) -> None:
        if self._current is not None:
            self._current.dispose()

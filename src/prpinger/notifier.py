"""The notifier: session holder, poller and command dispatch.

All mutable state (the session, the active display, the last time the window
lost focus) lives on one ``Notifier`` instance and is only changed from its own
handlers, which the event loop runs one at a time.
"""

from __future__ import annotations

import logging
import random
import webbrowser
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .auth import DEFAULT_SCOPES, GitHubAuthProvider
from .config import Config
from .errors import AuthenticationError, PrPingerError
from .github_client import GitHubClient
from .models import Command, PullRequestSummary, Session
from .presenter import PROMPT_LOGIN_COMMAND, SHOW_COMMAND, Presenter
from .selector import pick_candidate, select_candidates
from .status import StatusItem
from .timers import EventLoop, RepeatingTimer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notifier:
    """Polls for pull requests needing team review and nudges about one of them."""

    def __init__(
        self,
        config: Config,
        client: GitHubClient,
        auth_provider: GitHubAuthProvider,
        item: StatusItem,
        loop: EventLoop,
        open_external: Callable[[str], object] = webbrowser.open,
        draw: Callable[[], float] = random.random,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._client = client
        self._auth_provider = auth_provider
        self._loop = loop
        self._draw = draw
        self._clock = clock

        self._session: Optional[Session] = None
        self._last_unfocused: Optional[float] = None
        self._poll_timer: Optional[RepeatingTimer] = None
        self._presenter = Presenter(
            config=config,
            client=client,
            item=item,
            loop=loop,
            get_session=lambda: self._session,
            open_external=open_external,
        )

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def presenter(self) -> Presenter:
        return self._presenter

    def start(self) -> None:
        """Restore any existing session and start the periodic poll."""
        self.restore_silently()
        if self._poll_timer is None:
            self._poll_timer = self._loop.every(self._config.poll_interval_seconds, self.poll)

    def dispose(self) -> None:
        """Cancel every timer owned by the notifier."""
        if self._poll_timer is not None:
            self._poll_timer.cancel()
            self._poll_timer = None
        self._presenter.dispose()

    def login(self) -> Optional[PullRequestSummary]:
        """Obtain a session, prompting if necessary, then poll immediately."""
        try:
            session = self._auth_provider.get_session(DEFAULT_SCOPES, create_if_none=True)
        except AuthenticationError as exc:
            logger.warning("GitHub login failed", extra={"error": str(exc)})
        else:
            if session is not None:
                self._session = session
                logger.info("Logged in", extra={"account": session.account_label})
        return self.poll()

    def restore_silently(self, forced: bool = False) -> Optional[PullRequestSummary]:
        """Reuse an existing session without prompting, then poll."""
        try:
            self._session = self._auth_provider.get_session(DEFAULT_SCOPES, create_if_none=False)
        except AuthenticationError as exc:
            logger.warning("Could not restore GitHub session", extra={"error": str(exc)})
            self._session = None
        return self.poll(forced)

    def on_window_state_changed(self, focused: bool) -> None:
        """Track focus changes; a return after a long absence forces a poll."""
        now = self._loop.time()
        if not focused:
            self._last_unfocused = now
            return

        if self._last_unfocused is not None and now - self._last_unfocused > self._config.away_threshold_seconds:
            logger.info("Back after a long absence", extra={"away_seconds": now - self._last_unfocused})
            self.poll(forced=True)

    def poll(self, forced: bool = False) -> Optional[PullRequestSummary]:
        """Fetch open pull requests and display one that needs team review.

        Returns the pull request put on display, or ``None`` when nothing was
        shown. Fetch failures are logged and swallowed; the next poll retries.
        """
        session = self._session
        if session is None:
            self._presenter.show_not_logged_in()
            return None

        self._presenter.clear_not_logged_in()

        if self._presenter.is_displaying:
            return None

        try:
            prs = self._client.list_open_pull_requests(session.access_token)
        except PrPingerError as exc:
            logger.warning("Poll failed; retrying next interval", extra={"error": str(exc)})
            return None

        candidates = select_candidates(
            prs,
            account_label=session.account_label,
            now=self._clock(),
            max_age=timedelta(days=self._config.max_age_days),
            require_self_assignment=self._config.require_self_assignment,
        )
        pr = pick_candidate(candidates, forced, self._config.nudge_divisor, self._draw)
        if pr is None:
            return None

        self._presenter.display(pr, forced)
        return pr

    def activate_item(self) -> None:
        """Run the status item's command, ignoring clicks while it is hidden."""
        self.execute_command(self._presenter.active_command())

    def execute_command(self, command: Optional[Command]) -> None:
        """Run a status item command."""
        if command is None:
            return
        if command.name == PROMPT_LOGIN_COMMAND:
            self.login()
        elif command.name == SHOW_COMMAND:
            (pr,) = command.arguments
            self._presenter.open_pull_request(pr)
        else:
            raise ValueError(f"Unknown command '{command.name}'.")

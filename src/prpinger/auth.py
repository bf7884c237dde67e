"""GitHub session provider backed by GITHUB_TOKEN and the gh CLI.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session)

When a session is requested with ``create_if_none`` and neither source yields a
token, `gh auth login` is run interactively and the token is read again.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Optional, Sequence

from .errors import ApiError, AuthenticationError
from .github_client import GitHubClient
from .models import Session

logger = logging.getLogger(__name__)

PROVIDER_ID = "github"
DEFAULT_SCOPES = ("repo",)


def _read_gh_token() -> Optional[str]:
    """Return the token stored by `gh auth login`, or None."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode != 0:
        return None

    token = result.stdout.strip()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token or None


def resolve_github_token() -> Optional[str]:
    """Return a GitHub token or None if no valid source is available."""
    token = os.environ.get("GITHUB_TOKEN", "").strip()
    if token:
        return token
    return _read_gh_token()


class GitHubAuthProvider:
    """Obtains authenticated GitHub sessions without persisting anything itself."""

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    def _create_gh_session(self, scopes: Sequence[str]) -> None:
        """Run the interactive `gh auth login` flow.

        Raises:
            AuthenticationError: If gh is missing or the login is cancelled.
        """
        command = ["gh", "auth", "login", "--hostname", "github.com", "--scopes", ",".join(scopes)]
        logger.info("Starting interactive GitHub login", extra={"scopes": list(scopes)})
        try:
            result = subprocess.run(command, check=False)
        except FileNotFoundError as exc:
            raise AuthenticationError(
                "No GitHub token available. Set the 'GITHUB_TOKEN' environment variable "
                "or install the GitHub CLI (gh) to log in."
            ) from exc

        if result.returncode != 0:
            raise AuthenticationError(f"GitHub login was cancelled or failed (exit code {result.returncode}).")

    def get_session(
        self,
        scopes: Sequence[str] = DEFAULT_SCOPES,
        create_if_none: bool = False,
    ) -> Optional[Session]:
        """Return a session for ``scopes``, prompting only when ``create_if_none``.

        Returns:
            The session, or ``None`` when no token exists and prompting is off.

        Raises:
            AuthenticationError: If prompting fails or GitHub rejects the token.
        """
        token = resolve_github_token()
        if token is None and create_if_none:
            self._create_gh_session(scopes)
            token = _read_gh_token()
            if token is None:
                raise AuthenticationError("GitHub login finished but no token could be read from gh.")

        if token is None:
            return None

        try:
            login = self._client.get_viewer_login(token)
        except ApiError as exc:
            raise AuthenticationError("GitHub rejected the resolved token.") from exc

        return Session(access_token=token, account_label=login)

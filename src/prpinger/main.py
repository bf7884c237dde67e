"""Entry point wiring the notifier to GitHub and the terminal."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .auth import GitHubAuthProvider
from .cli import parse_args
from .config import load_config
from .errors import ApiError, AuthenticationError, ConfigurationError
from .github_client import GitHubClient
from .notifier import Notifier
from .status import StatusItem, TerminalStatusItem
from .terminal import TerminalInput
from .timers import EventLoop

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run_once(notifier: Notifier, item: StatusItem) -> int:
    """Restore the session, poll once with the nudge gate bypassed, and report."""
    try:
        pr = notifier.restore_silently(forced=True)
        if notifier.session is None:
            raise AuthenticationError(
                "Not logged in. Set the 'GITHUB_TOKEN' environment variable or run 'gh auth login'."
            )

        if pr is not None:
            print(item.format_line())
            print(pr.url)
    finally:
        notifier.dispose()
    return EXIT_OK


def run_forever(notifier: Notifier, item: StatusItem, terminal: TerminalInput, loop: EventLoop) -> int:
    """Run the notifier until interrupted."""
    with terminal:
        notifier.start()
        try:
            loop.run()
        except KeyboardInterrupt:
            logger.info("Interrupted; shutting down")
        finally:
            notifier.dispose()
            item.hide()
    return EXIT_OK


def run_notifier(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, build the notifier and run it, mapping errors to exit codes."""
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)
        config = load_config(
            owner=args.owner,
            repo=args.repo,
            presentation=args.presentation,
            require_self_assignment=args.require_self_assignment,
        )

        client = GitHubClient(config=config)
        auth_provider = GitHubAuthProvider(client)
        item = StatusItem() if args.once else TerminalStatusItem()

        notifier: Optional[Notifier] = None

        def _on_focus_change(focused: bool) -> None:
            if notifier is not None:
                notifier.on_window_state_changed(focused)

        def _on_activate() -> None:
            if notifier is not None:
                notifier.activate_item()

        terminal = TerminalInput(on_focus_change=_on_focus_change, on_activate=_on_activate)
        loop = EventLoop(delayfunc=terminal.wait)
        notifier = Notifier(
            config=config,
            client=client,
            auth_provider=auth_provider,
            item=item,
            loop=loop,
        )

        if args.once:
            return run_once(notifier, item)
        return run_forever(notifier, item, terminal, loop)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        print(f"Authentication error: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        print(f"GitHub API error: {exc}", file=sys.stderr)
        return EXIT_API
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error")
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED


def main() -> int:
    return run_notifier()


if __name__ == "__main__":
    raise SystemExit(main())

"""Selection logic deciding which pull request, if any, to nudge about.

The selector narrows one poll's batch to candidates and samples one of them:
- keep only pull requests that still need team review
- drop pull requests authored by the logged-in account
- drop pull requests older than the staleness cutoff
- apply the nudge gate, then pick uniformly at random
"""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from .models import PullRequestSummary

logger = logging.getLogger(__name__)

MEMBER_ASSOCIATION = "MEMBER"


def needs_team_review(pr: PullRequestSummary, require_self_assignment: bool = True) -> bool:
    """Return whether ``pr`` is an unclaimed team pull request awaiting review.

    With ``require_self_assignment`` the pull request must additionally be
    assigned to exactly one account, its author. The repository's PR bot
    assigns the poster as owner, so that marks a freshly opened, unclaimed PR.
    """
    if pr.author_association != MEMBER_ASSOCIATION:
        return False
    if pr.is_draft:
        return False
    if pr.review_request_count != 0 or pr.review_count != 0:
        return False
    if require_self_assignment:
        return len(pr.assignee_logins) == 1 and pr.assignee_logins[0] == pr.author_login
    return True


def select_candidates(
    prs: Sequence[PullRequestSummary],
    account_label: str,
    now: datetime,
    max_age: timedelta = timedelta(days=4),
    require_self_assignment: bool = True,
) -> List[PullRequestSummary]:
    """Filter a poll batch down to nudge candidates, newest first."""
    cutoff = now - max_age
    candidates = [
        pr
        for pr in prs
        if needs_team_review(pr, require_self_assignment)
        and pr.author_login != account_label
        and pr.created_at is not None
        and pr.created_at > cutoff
    ]
    candidates.sort(key=lambda pr: pr.created_at, reverse=True)

    logger.debug(
        "Selected nudge candidates",
        extra={"prs_total": len(prs), "candidates": len(candidates), "cutoff": cutoff.isoformat()},
    )
    return candidates


def passes_nudge_gate(candidate_count: int, divisor: int = 7, draw: Callable[[], float] = random.random) -> bool:
    """Decide whether an unforced poll should display anything.

    ``chance`` is a candidate count ceiling, not a probability, so for one or
    more candidates a draw from ``[0, 1)`` never exceeds it.
    """
    chance = math.ceil(candidate_count / divisor)
    return not draw() > chance


def pick_candidate(
    candidates: Sequence[PullRequestSummary],
    forced: bool,
    divisor: int = 7,
    draw: Callable[[], float] = random.random,
) -> Optional[PullRequestSummary]:
    """Sample one candidate, or return None when nothing should be shown."""
    if not candidates:
        return None

    if not forced and not passes_nudge_gate(len(candidates), divisor, draw):
        logger.info("Skipping nudge by chance", extra={"candidates": len(candidates)})
        return None

    index = math.floor(draw() * len(candidates))
    return candidates[index]

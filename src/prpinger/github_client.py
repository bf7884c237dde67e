"""GitHub GraphQL API client for pull request review polling."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, DataValidationError
from .models import PullRequestSummary

LIST_QUERY = """
query openPullRequests($owner: String!, $name: String!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequests(
      first: $first
      states: OPEN
      orderBy: {field: CREATED_AT, direction: DESC}
    ) {
      edges {
        node {
          title
          number
          url
          createdAt
          authorAssociation
          author {
            login
          }
          assignees(first: 5) {
            nodes {
              login
            }
          }
          isDraft
          reviewRequests(last: 1) {
            totalCount
          }
          reviews(last: 1) {
            totalCount
          }
        }
      }
    }
  }
}
"""

CHECK_QUERY = """
query validate($owner: String!, $name: String!, $pr: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $pr) {
      number
      authorAssociation
      author {
        login
      }
      assignees(first: 5) {
        nodes {
          login
        }
      }
      isDraft
      reviewRequests(last: 1) {
        totalCount
      }
      reviews(last: 1) {
        totalCount
      }
    }
  }
}
"""

VIEWER_QUERY = """
query viewer {
  viewer {
    login
  }
}
"""


class GitHubClient:
    """Small, typed client for the GitHub GraphQL pull request queries."""

    _GRAPHQL_URL = "https://api.github.com/graphql"

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize a GraphQL client for the configured repository.

        Args:
            config: Validated runtime configuration including owner and repo.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def execute(self, token: str, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute one GraphQL document and return its ``data`` object.

        No retry happens here; a failed request surfaces as ``ApiError`` and the
        caller's next scheduled cycle is the retry.

        Raises:
            ApiError: If the request fails, returns HTTP >= 400, does not return
                valid JSON, or reports GraphQL errors.
        """
        try:
            response = self._session.post(
                self._GRAPHQL_URL,
                json={"query": query, "variables": dict(variables or {})},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiError(f"GitHub GraphQL request failed: POST {self._GRAPHQL_URL}") from exc

        if response.status_code >= 400:
            raise ApiError(
                "GitHub GraphQL request failed: "
                f"POST {self._GRAPHQL_URL} returned {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub GraphQL API returned invalid JSON: POST {self._GRAPHQL_URL}") from exc

        if not isinstance(payload, dict):
            raise ApiError(f"GitHub GraphQL API returned unexpected payload shape: POST {self._GRAPHQL_URL}")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors if isinstance(error, dict))
            raise ApiError(f"GitHub GraphQL API reported errors: {messages or errors}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise ApiError(f"GitHub GraphQL API returned no data: POST {self._GRAPHQL_URL}")

        return data

    def _repository_variables(self) -> Dict[str, Any]:
        return {"owner": self._config.owner, "name": self._config.repo}

    def _to_summary(self, node: Dict[str, Any]) -> PullRequestSummary:
        """Project a GraphQL pull request node onto ``PullRequestSummary``."""
        number = node.get("number")
        author = node.get("author") or {}
        review_requests = node.get("reviewRequests") or {}
        reviews = node.get("reviews") or {}
        assignees = (node.get("assignees") or {}).get("nodes") or []

        if number is None or "totalCount" not in review_requests or "totalCount" not in reviews:
            raise DataValidationError(
                f"GitHub pull request payload is missing required fields: payload={node}"
            )

        try:
            number = int(number)
            review_request_count = int(review_requests["totalCount"])
            review_count = int(reviews["totalCount"])
            created_at = self._parse_datetime(node.get("createdAt"))
        except (AttributeError, TypeError, ValueError) as exc:
            raise DataValidationError(
                f"GitHub pull request payload has malformed fields: payload={node}"
            ) from exc

        return PullRequestSummary(
            number=number,
            # Deleted accounts come back as a null author.
            author_login=str(author.get("login") or ""),
            author_association=str(node.get("authorAssociation") or ""),
            is_draft=bool(node.get("isDraft")),
            review_request_count=review_request_count,
            review_count=review_count,
            assignee_logins=tuple(str(item["login"]) for item in assignees if item and item.get("login")),
            title=str(node.get("title") or ""),
            url=str(node.get("url") or ""),
            created_at=created_at,
        )

    def list_open_pull_requests(self, token: str) -> List[PullRequestSummary]:
        """List the newest open pull requests of the configured repository."""
        variables = self._repository_variables()
        variables["first"] = self._config.batch_size
        data = self.execute(token, LIST_QUERY, variables)

        repository = data.get("repository")
        if repository is None:
            raise ApiError(f"Repository '{self._config.owner}/{self._config.repo}' was not found.")

        edges = (repository.get("pullRequests") or {}).get("edges") or []
        return [self._to_summary(edge["node"]) for edge in edges if edge and edge.get("node")]

    def get_pull_request(self, token: str, number: int) -> Optional[PullRequestSummary]:
        """Fetch the review-relevant state of a single pull request.

        Returns ``None`` when the pull request no longer exists.
        """
        variables = self._repository_variables()
        variables["pr"] = number
        data = self.execute(token, CHECK_QUERY, variables)

        repository = data.get("repository")
        if repository is None:
            raise ApiError(f"Repository '{self._config.owner}/{self._config.repo}' was not found.")

        node = repository.get("pullRequest")
        if node is None:
            return None
        return self._to_summary(node)

    def get_viewer_login(self, token: str) -> str:
        """Return the login of the account that owns ``token``."""
        data = self.execute(token, VIEWER_QUERY)
        login = (data.get("viewer") or {}).get("login")
        if not login:
            raise ApiError("GitHub GraphQL API did not return a viewer login.")
        return str(login)

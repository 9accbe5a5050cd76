import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import httpx

from contributions_api.api.schemas.contributions import DateWindow


logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch contributions data from GitHub"

CONTRIBUTION_CALENDAR_QUERY = """
query($username: String!, $from: DateTime, $to: DateTime) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        total: totalContributions
        weeks {
          days: contributionDays {
            count: contributionCount
            date
            contributionLevel
          }
        }
      }
    }
  }
}
"""


class UpstreamError(Exception):
    """Raised when the GitHub GraphQL API cannot be reached or parsed."""

    def __init__(self, message: str = FETCH_FAILED_MESSAGE) -> None:
        super().__init__(message)


def _format_datetime(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def fetch_contribution_calendar(
    username: str,
    token: str | None,
    window: DateWindow,
    graphql_url: str,
    timeout: float = 20.0,
) -> dict[str, Any]:
    """Fetch the contribution calendar for `username` within `window`.

    Returns the raw `contributionCalendar` mapping holding `total` and
    `weeks[].days[]`. GraphQL-level errors are not interpreted here.

    Raises:
        ValueError: If no token is configured.
        UpstreamError: If the request fails or the body is not JSON.
    """

    if not token:
        raise ValueError("GITHUB_TOKEN is required for GraphQL requests")

    variables = {
        "username": username,
        "from": _format_datetime(window.from_),
        "to": _format_datetime(window.to),
    }
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": "github-contributions-api",
    }

    try:
        response = httpx.post(
            graphql_url,
            json={"query": CONTRIBUTION_CALENDAR_QUERY, "variables": variables},
            headers=headers,
            timeout=timeout,
        )
        response.raise_for_status()
        payload: Any = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamError() from exc

    if isinstance(payload, Mapping) and payload.get("errors"):
        logger.warning(
            "GitHub GraphQL returned errors for %s: %s", username, payload["errors"]
        )

    return payload["data"]["user"]["contributionsCollection"]["contributionCalendar"]

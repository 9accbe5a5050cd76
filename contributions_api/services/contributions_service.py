import logging
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from contributions_api.api.schemas.contributions import ActivityRecord
from contributions_api.api.schemas.contributions import ContributionsResponse
from contributions_api.api.schemas.contributions import QueryOptions
from contributions_api.github_api import fetch_contribution_calendar
from contributions_api.services.date_window import resolve_date_window
from contributions_api.settings import Settings


logger = logging.getLogger(__name__)

CONTRIBUTION_LEVELS: dict[str, int] = {
    "NONE": 0,
    "FIRST_QUARTILE": 1,
    "SECOND_QUARTILE": 2,
    "THIRD_QUARTILE": 3,
    "FOURTH_QUARTILE": 4,
}

CSV_HEADER = "date,count,level"


def map_contribution_level(label: Any) -> int:
    """Map a GitHub contribution level label to a heatmap level in range 0..4."""

    if not isinstance(label, str):
        return 0
    return CONTRIBUTION_LEVELS.get(label, 0)


def map_activities(calendar: Mapping[str, Any]) -> list[ActivityRecord]:
    """Flatten calendar weeks and days into an ordered list of activities."""

    activities: list[ActivityRecord] = []
    for week in calendar["weeks"]:
        for day in week["days"]:
            activities.append(
                ActivityRecord(
                    date=day["date"],
                    count=day["count"],
                    level=map_contribution_level(day.get("contributionLevel")),
                )
            )
    return activities


def to_csv(activities: Iterable[ActivityRecord]) -> str:
    """Render activities as CSV with a `date,count,level` header."""

    rows = [f"{item.date},{item.count},{item.level}" for item in activities]
    return "\n".join([CSV_HEADER, *rows])


def get_contributions_data(
    username: str,
    options: QueryOptions,
    settings: Settings,
    now: datetime | None = None,
) -> ContributionsResponse:
    """Fetch and reshape contributions for `username` using validated options."""

    window = resolve_date_window(
        options, now=now, align_week_start=settings.align_week_start
    )
    logger.info(
        "Fetching contributions for %s from %s to %s",
        username,
        window.from_.date().isoformat(),
        window.to.date().isoformat(),
    )

    calendar = fetch_contribution_calendar(
        username=username,
        token=settings.github_token,
        window=window,
        graphql_url=settings.github_graphql_url,
        timeout=settings.github_timeout_seconds,
    )
    activities = map_activities(calendar)

    return ContributionsResponse(
        to=window.to.date(),
        from_=window.from_.date(),
        total=calendar["total"],
        activities=activities,
    )

from datetime import datetime
from datetime import UTC

import httpx
import pytest

from contributions_api.api.schemas.contributions import DateWindow
from contributions_api.github_api import FETCH_FAILED_MESSAGE
from contributions_api.github_api import UpstreamError
from contributions_api.github_api import fetch_contribution_calendar


GRAPHQL_URL = "https://api.github.com/graphql"

WINDOW = DateWindow(
    from_=datetime(2023, 12, 31, tzinfo=UTC),
    to=datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC),
)

CALENDAR = {
    "total": 1,
    "weeks": [
        {"days": [{"count": 1, "date": "2024-01-01", "contributionLevel": "FIRST_QUARTILE"}]}
    ],
}


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code, request=httpx.Request("POST", GRAPHQL_URL), **kwargs
    )


def test_fetch_contribution_calendar_returns_calendar(monkeypatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_post(url, json, headers, timeout):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        payload = {
            "data": {
                "user": {"contributionsCollection": {"contributionCalendar": CALENDAR}}
            }
        }
        return _response(200, json=payload)

    monkeypatch.setattr("contributions_api.github_api.httpx.post", fake_post)

    calendar = fetch_contribution_calendar(
        "octocat", "test-token", WINDOW, GRAPHQL_URL, timeout=3.0
    )

    assert calendar == CALENDAR
    assert calls[0]["url"] == GRAPHQL_URL
    assert calls[0]["timeout"] == 3.0
    assert calls[0]["headers"]["Authorization"] == "Bearer test-token"
    assert calls[0]["json"]["variables"] == {
        "username": "octocat",
        "from": "2023-12-31T00:00:00Z",
        "to": "2024-01-31T23:59:59Z",
    }


def test_fetch_contribution_calendar_requires_token() -> None:
    with pytest.raises(ValueError, match="GITHUB_TOKEN"):
        fetch_contribution_calendar("octocat", None, WINDOW, GRAPHQL_URL)


def test_fetch_contribution_calendar_wraps_network_errors(monkeypatch) -> None:
    def fake_post(url, json, headers, timeout):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr("contributions_api.github_api.httpx.post", fake_post)

    with pytest.raises(UpstreamError) as exc_info:
        fetch_contribution_calendar("octocat", "test-token", WINDOW, GRAPHQL_URL)

    assert str(exc_info.value) == FETCH_FAILED_MESSAGE


def test_fetch_contribution_calendar_wraps_unparsable_body(monkeypatch) -> None:
    def fake_post(url, json, headers, timeout):
        return _response(200, content=b"<html>not json</html>")

    monkeypatch.setattr("contributions_api.github_api.httpx.post", fake_post)

    with pytest.raises(UpstreamError):
        fetch_contribution_calendar("octocat", "test-token", WINDOW, GRAPHQL_URL)


def test_fetch_contribution_calendar_wraps_error_status(monkeypatch) -> None:
    def fake_post(url, json, headers, timeout):
        return _response(401, json={"message": "Bad credentials"})

    monkeypatch.setattr("contributions_api.github_api.httpx.post", fake_post)

    with pytest.raises(UpstreamError):
        fetch_contribution_calendar("octocat", "bad-token", WINDOW, GRAPHQL_URL)


def test_fetch_contribution_calendar_leaves_graphql_errors_to_caller(
    monkeypatch,
) -> None:
    def fake_post(url, json, headers, timeout):
        return _response(200, json={"errors": [{"message": "Could not resolve"}]})

    monkeypatch.setattr("contributions_api.github_api.httpx.post", fake_post)

    with pytest.raises(KeyError):
        fetch_contribution_calendar("octocat", "test-token", WINDOW, GRAPHQL_URL)

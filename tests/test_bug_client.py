"""BugClient 테스트 — 앱 대상 호출, 오류 정규화, 쿼리 직렬화.

BugClient tests — calls against the in-process app, error normalization and
query serialization.
"""

import httpx
import pytest

from bugtracker.client.bug_client import (
    CONNECTION_ERROR_MESSAGE,
    BugApiError,
    BugClient,
    BugConnectionError,
    build_query,
)
from tests.conftest import bug_payload, unreachable_client


class TestBuildQuery:
    """필터 직렬화 테스트."""

    def test_omits_empty_values(self):
        assert build_query({"status": "open", "severity": "", "priority": None, "page": 2}) == {
            "status": "open",
            "page": "2",
        }

    def test_no_filters(self):
        assert build_query(None) == {}
        assert build_query({}) == {}


class TestBugClientAgainstApp:
    """실제 앱을 대상으로 한 클라이언트 호출."""

    async def test_crud_round_trip(self, bug_client: BugClient):
        created = await bug_client.create_bug(bug_payload())
        bug_id = created["data"]["_id"]

        fetched = await bug_client.get_bug(bug_id)
        assert fetched["data"]["title"] == "Login button unresponsive"

        updated = await bug_client.update_bug(bug_id, bug_payload(status="closed"))
        assert updated["data"]["status"] == "closed"

        listing = await bug_client.get_bugs({"status": "closed", "severity": ""})
        assert [b["_id"] for b in listing["data"]] == [bug_id]

        stats = await bug_client.get_stats()
        assert stats["data"]["closed"] == 1

        deleted = await bug_client.delete_bug(bug_id)
        assert deleted["message"] == "Bug deleted successfully"

    async def test_validation_error_surfaces_error_list(self, bug_client: BugClient):
        with pytest.raises(BugApiError) as exc_info:
            await bug_client.create_bug({"title": "Only title"})
        err = exc_info.value
        assert err.status_code == 400
        assert err.message == "Validation failed"
        assert err.errors == ["Description is required", "Reporter is required"]

    async def test_not_found_surfaces_server_message(self, bug_client: BugClient):
        with pytest.raises(BugApiError) as exc_info:
            await bug_client.get_bug("00000000-0000-0000-0000-000000000000")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Bug not found"
        assert exc_info.value.errors == []


class TestBugClientFailures:
    """오류 정규화 테스트."""

    async def test_unreachable_server(self):
        client = unreachable_client()
        with pytest.raises(BugConnectionError) as exc_info:
            await client.get_bugs()
        assert exc_info.value.message == CONNECTION_ERROR_MESSAGE
        await client.aclose()

    async def test_non_json_error_uses_fallback_message(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        client = BugClient(httpx.AsyncClient(transport=transport), "http://proxy/api")
        with pytest.raises(BugApiError) as exc_info:
            await client.get_stats()
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "API request failed"
        await client.aclose()

    async def test_sends_filters_as_query_params(self):
        seen: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": []})

        async with BugClient(httpx.AsyncClient(transport=httpx.MockTransport(_handler)), "http://api/api/") as client:
            await client.get_bugs({"priority": "high", "status": ""})
        assert seen[0].url.path == "/api/bugs"
        assert dict(seen[0].url.params) == {"priority": "high"}

"""HTML 페이지 테스트 — 목록, 등록/수정 폼, 삭제.

HTML page tests. Pages reach the API through the injected BugClient, which the
``bug_client`` fixture points at the same in-process app.
"""

import httpx
from httpx import AsyncClient

from bugtracker.api.deps import get_bug_client
from bugtracker.api.pages import SAVE_FAILED_MESSAGE, _pager
from bugtracker.client.bug_client import BugClient
from bugtracker.main import app
from tests.conftest import URL, bug_payload, insert_bug, unreachable_client

FORM = {
    "title": "Form bug",
    "description": "Created from the HTML form",
    "severity": "low",
    "status": "open",
    "priority": "medium",
    "reportedBy": "Tester",
    "assignedTo": "",
    "environment": "",
    "stepsToReproduce": "",
}


class TestListPage:
    """목록 페이지 테스트."""

    async def test_empty_list(self, client: AsyncClient, bug_client):
        res = await client.get("/")
        assert res.status_code == 200
        assert "No bugs found" in res.text
        assert "Total Bugs" in res.text

    async def test_lists_and_escapes(self, client: AsyncClient, bug_client, db):
        await insert_bug(db, title="<b>bold</b> title", status="resolved")
        res = await client.get("/")
        assert "&lt;b&gt;bold&lt;/b&gt; title" in res.text
        assert "<b>bold</b>" not in res.text

    async def test_filters_pass_through(self, client: AsyncClient, bug_client, db):
        await insert_bug(db, title="Open one", status="open")
        await insert_bug(db, title="Closed one", status="closed")
        res = await client.get("/", params={"status": "closed"})
        assert "Closed one" in res.text
        assert "Open one" not in res.text

    async def test_server_unreachable(self, client: AsyncClient):
        down = unreachable_client()

        async def _override():
            yield down

        app.dependency_overrides[get_bug_client] = _override
        res = await client.get("/")
        assert res.status_code == 502
        assert "Unable to connect to server" in res.text
        await down.aclose()


class TestCreateForm:
    """등록 폼 테스트."""

    async def test_new_form(self, client: AsyncClient, bug_client):
        res = await client.get("/bugs/new")
        assert res.status_code == 200
        assert 'name="reportedBy"' in res.text

    async def test_submit_creates_and_redirects(self, client: AsyncClient, bug_client):
        res = await client.post("/bugs/new", data=FORM)
        assert res.status_code == 303
        assert res.headers["location"] == "/"
        listing = (await client.get(URL)).json()
        assert [b["title"] for b in listing["data"]] == ["Form bug"]
        assert listing["data"][0]["assignedTo"] is None

    async def test_submit_shows_field_errors(self, client: AsyncClient, bug_client):
        res = await client.post("/bugs/new", data={**FORM, "title": "   ", "reportedBy": ""})
        assert res.status_code == 400
        assert "Title is required" in res.text
        assert "Reporter is required" in res.text
        assert (await client.get(URL)).json()["pagination"]["total"] == 0

    async def test_server_storage_error_mapped_to_field(self, client: AsyncClient, bug_client):
        """폼은 통과하지만 서버 저장 제한에 걸리는 경우."""
        res = await client.post("/bugs/new", data={**FORM, "reportedBy": "r" * 60})
        assert res.status_code == 400
        assert "Reporter name cannot exceed 50 characters" in res.text


class TestEditForm:
    """수정/삭제 폼 테스트."""

    async def test_edit_prefills(self, client: AsyncClient, bug_client, db):
        bug = await insert_bug(db, title="Editable", severity="critical")
        res = await client.get(f"/bugs/{bug.id}/edit")
        assert res.status_code == 200
        assert 'value="Editable"' in res.text
        assert '<option value="critical" selected>' in res.text

    async def test_edit_missing_bug(self, client: AsyncClient, bug_client):
        res = await client.get("/bugs/00000000-0000-0000-0000-000000000000/edit")
        assert res.status_code == 404
        assert "Bug not found" in res.text

    async def test_edit_submit(self, client: AsyncClient, bug_client, db):
        bug = await insert_bug(db, title="Before")
        res = await client.post(f"/bugs/{bug.id}/edit", data={**FORM, "title": "After", "status": "resolved"})
        assert res.status_code == 303
        data = (await client.get(f"{URL}/{bug.id}")).json()["data"]
        assert data["title"] == "After"
        assert data["status"] == "resolved"

    async def test_delete(self, client: AsyncClient, bug_client):
        created = (await client.post(URL, json=bug_payload())).json()["data"]
        res = await client.post(f"/bugs/{created['_id']}/delete")
        assert res.status_code == 303
        again = await client.post(f"/bugs/{created['_id']}/delete")
        assert again.status_code == 404
        assert "Bug not found" in again.text

    async def test_edit_submit_malformed_id_shows_server_message(self, client: AsyncClient, bug_client):
        res = await client.post("/bugs/not-a-uuid/edit", data=FORM)
        assert res.status_code == 400
        assert "Invalid bug ID format" in res.text
        assert SAVE_FAILED_MESSAGE not in res.text

    async def test_submit_server_error_shows_generic_message(self, client: AsyncClient):
        def _fail(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"success": False, "message": "Server Error"})

        failing = BugClient(httpx.AsyncClient(transport=httpx.MockTransport(_fail)), "http://test/api")

        async def _override():
            yield failing

        app.dependency_overrides[get_bug_client] = _override
        res = await client.post("/bugs/new", data=FORM)
        assert res.status_code == 400
        assert SAVE_FAILED_MESSAGE in res.text
        await failing.aclose()


class TestPager:
    """페이지 링크 테스트."""

    def test_no_links_for_single_page(self):
        assert _pager({"status": ""}, {"page": 1, "pages": 1}) == ""

    def test_links_carry_url_encoded_filters(self):
        html = _pager({"status": "in-progress", "severity": "a&b=c", "priority": ""}, {"page": 2, "pages": 3})
        assert 'href="/?page=1&amp;status=in-progress&amp;severity=a%26b%3Dc"' in html
        assert 'href="/?page=3&amp;status=in-progress&amp;severity=a%26b%3Dc"' in html
        assert "priority" not in html
        assert "Page 2 of 3" in html

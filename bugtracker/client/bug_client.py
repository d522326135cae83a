"""버그 API 클라이언트 — httpx 기반 데이터 서비스.

Bug API client used by the HTML pages (and usable on its own).
It wraps one outbound call per API operation and reduces every failure to a
``BugClientError``:

    - ``BugApiError``: the server answered with a non-2xx status; carries the
      server's message, status code and error list.
    - ``BugConnectionError``: the request never reached the server.

The client is constructed explicitly around an ``httpx.AsyncClient``; there is
no module-level instance.

Usage:
    async with BugClient.connect("http://localhost:8000/api") as client:
        page = await client.get_bugs({"status": "open"})
"""

import logging
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE: str = "Unable to connect to server. Please check if the server is running."
DEFAULT_API_ERROR_MESSAGE: str = "API request failed"


class BugClientError(Exception):
    """클라이언트 오류 공통 부모 — Base class of every client-side failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message


class BugApiError(BugClientError):
    """서버가 요청을 거부함 — The server rejected the request."""

    def __init__(
        self,
        message: str,
        status_code: int,
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code: int = status_code
        self.errors: list[str] = list(errors or [])


class BugConnectionError(BugClientError):
    """서버에 도달하지 못함 — The server could not be reached."""

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE) -> None:
        super().__init__(message)


def build_query(filters: Mapping[str, Any] | None) -> dict[str, str]:
    """빈 값을 제외한 쿼리 파라미터 — Key/value pairs, empty values omitted."""
    if not filters:
        return {}
    return {key: str(value) for key, value in filters.items() if value not in (None, "")}


class BugClient:
    """버그 API 호출 래퍼.

    Args:
        http: 요청에 사용할 httpx 비동기 클라이언트 (Async client used for calls)
        base_url: API 루트, 예: "http://localhost:8000/api" (API root URL)
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = "") -> None:
        self._http: httpx.AsyncClient = http
        self._base_url: str = base_url.rstrip("/")

    @classmethod
    def connect(cls, base_url: str, timeout: float = 10.0) -> "BugClient":
        """새 httpx 클라이언트를 소유하는 인스턴스 생성."""
        return cls(httpx.AsyncClient(timeout=timeout), base_url)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BugClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        logger.debug("API request: %s %s", method, url)
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Network error on %s %s: %s", method, url, exc)
            raise BugConnectionError() from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            body = data if isinstance(data, dict) else {}
            logger.info("API error %d on %s %s: %s", response.status_code, method, url, body)
            raise BugApiError(
                body.get("message") or DEFAULT_API_ERROR_MESSAGE,
                response.status_code,
                errors=body.get("errors"),
            )
        return data

    async def get_bugs(self, filters: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self._request("GET", "/bugs", params=build_query(filters))

    async def get_bug(self, bug_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/bugs/{bug_id}")

    async def get_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/bugs/stats")

    async def create_bug(self, bug_data: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/bugs", json=dict(bug_data))

    async def update_bug(self, bug_id: str, bug_data: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/bugs/{bug_id}", json=dict(bug_data))

    async def delete_bug(self, bug_id: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/bugs/{bug_id}")

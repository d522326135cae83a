"""FastAPI 의존성 주입 모듈 — 화면 계층용 API 클라이언트.

FastAPI dependency injection module.
The HTML pages never touch the database; they receive a ``BugClient`` through
``get_bug_client`` and go through the REST API like any other client.
Tests override this dependency to point the client at the in-process app.
"""

from collections.abc import AsyncGenerator

from bugtracker.client.bug_client import BugClient
from bugtracker.config import settings


async def get_bug_client() -> AsyncGenerator[BugClient, None]:
    """요청마다 API_BASE_URL 대상 클라이언트를 생성하고 닫습니다.

    Yield a client bound to ``settings.API_BASE_URL`` and close it after the
    request completes.
    """
    async with BugClient.connect(settings.API_BASE_URL) as client:
        yield client

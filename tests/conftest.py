"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session and httpx client
fixtures. Every test gets a fresh schema; each API request gets its own
session, as it does in production.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from bugtracker.api.deps import get_bug_client
from bugtracker.client.bug_client import BugClient
from bugtracker.database import Base, get_db
from bugtracker.main import app
from bugtracker.models import *  # noqa: F401,F403 — register all models with metadata
from bugtracker.models.bug import Bug

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

URL = "/api/bugs"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 스키마."""
    eng = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """테스트 본문에서 직접 쓰는 DB 세션."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — 요청마다 새 DB 세션을 주입합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def bug_client(client: AsyncClient) -> BugClient:
    """동일 앱을 대상으로 하는 BugClient — 화면 계층 테스트에도 주입."""
    bug_api = BugClient(client, "http://test/api")

    async def _override_get_bug_client() -> AsyncGenerator[BugClient, None]:
        yield bug_api

    app.dependency_overrides[get_bug_client] = _override_get_bug_client
    return bug_api


def bug_payload(**overrides) -> dict:
    """유효한 버그 요청 본문 — A valid create body, overridable per field."""
    payload = {
        "title": "Login button unresponsive",
        "description": "Clicking the login button does nothing on Safari.",
        "severity": "high",
        "status": "open",
        "priority": "high",
        "reportedBy": "Jane Doe",
    }
    payload.update(overrides)
    return payload


async def insert_bug(db: AsyncSession, minutes_ago: int = 0, **overrides) -> Bug:
    """DB에 직접 버그를 저장합니다 — created_at 을 과거로 지정 가능."""
    stamp = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    values = {
        "title": "Seeded bug",
        "description": "Seeded description",
        "reported_by": "Seeder",
        "created_at": stamp,
        "updated_at": stamp,
    }
    values.update(overrides)
    bug = Bug(**values)
    db.add(bug)
    await db.commit()
    await db.refresh(bug)
    return bug


def unreachable_client() -> BugClient:
    """항상 연결 실패하는 클라이언트 — Every request raises ConnectError."""
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return BugClient(httpx.AsyncClient(transport=httpx.MockTransport(_refuse)), "http://down/api")

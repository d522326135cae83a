"""버그 API 라우터 — 버그 CRUD 엔드포인트.

Bug API Router — REST endpoints under ``/api/bugs``.
Responses use the ``{"success": ..., "data": ...}`` envelope; errors are
rendered by ``bugtracker.api.error_handlers``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bugtracker.config import settings
from bugtracker.database import get_db
from bugtracker.schemas.bug import BugFilters, BugPayload
from bugtracker.services.bug_service import bug_service
from bugtracker.utils.pagination import MAX_PAGE, Pagination, parse_positive_int

router: APIRouter = APIRouter()


@router.get("")
async def list_bugs(
    db: Annotated[AsyncSession, Depends(get_db)],
    status: str | None = None,
    severity: str | None = None,
    priority: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> dict:
    """버그 목록 조회 — 생성일 역순, status/severity/priority 필터."""
    filters = BugFilters(status=status, severity=severity, priority=priority)
    page_number: int = parse_positive_int(page, 1, MAX_PAGE)
    page_size: int = parse_positive_int(limit, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    bugs, total = await bug_service.list_bugs(db, filters, page_number, page_size)
    return {
        "success": True,
        "data": [bug_service.build_response(b) for b in bugs],
        "pagination": Pagination.build(page_number, page_size, total).model_dump(),
    }


@router.get("/stats")
async def bug_stats(db: Annotated[AsyncSession, Depends(get_db)]) -> dict:
    """상태/심각도별 집계."""
    return {"success": True, "data": await bug_service.get_stats(db)}


@router.get("/{bug_id}")
async def get_bug(bug_id: str, db: Annotated[AsyncSession, Depends(get_db)]) -> dict:
    bug = await bug_service.get_bug(db, bug_id)
    return {"success": True, "data": bug_service.build_response(bug)}


@router.post("", status_code=201)
async def create_bug(
    data: BugPayload,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """새 버그를 생성합니다.

    Sanitize, validate and persist a new bug. Validation failures are
    returned as a 400 with every error message; nothing is stored.
    """
    bug = await bug_service.create_bug(db, data.to_wire())
    await db.commit()
    return {
        "success": True,
        "data": bug_service.build_response(bug),
        "message": "Bug created successfully",
    }


@router.put("/{bug_id}")
async def update_bug(
    bug_id: str,
    data: BugPayload,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """버그 전체 교체 수정 — omitted optional fields are cleared."""
    bug = await bug_service.update_bug(db, bug_id, data.to_wire())
    await db.commit()
    return {
        "success": True,
        "data": bug_service.build_response(bug),
        "message": "Bug updated successfully",
    }


@router.delete("/{bug_id}")
async def delete_bug(bug_id: str, db: Annotated[AsyncSession, Depends(get_db)]) -> dict:
    await bug_service.delete_bug(db, bug_id)
    await db.commit()
    return {"success": True, "message": "Bug deleted successfully"}

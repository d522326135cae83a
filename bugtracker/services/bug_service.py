"""버그 서비스.

Bug service — Sanitize, validate and persist bug records.
Every write path runs ``sanitize_bug_data`` then ``validate_bug_data`` before
touching the repository, whatever the caller already checked.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bugtracker.models.bug import Bug, check_storage_limits
from bugtracker.repositories.bug_repository import bug_repository
from bugtracker.schemas.bug import BugFilters
from bugtracker.utils.exceptions import BadRequestError, NotFoundError, ValidationFailedError
from bugtracker.utils.validation import sanitize_bug_data, validate_bug_data

logger = logging.getLogger(__name__)

BUG_NOT_FOUND: str = "Bug not found"

# camelCase 필드 → 컬럼 — Wire field name to column name
_COLUMNS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "severity": "severity",
    "status": "status",
    "priority": "priority",
    "reportedBy": "reported_by",
    "assignedTo": "assigned_to",
    "environment": "environment",
    "stepsToReproduce": "steps_to_reproduce",
}

_ENUM_DEFAULTS: dict[str, str] = {
    "severity": "medium",
    "status": "open",
    "priority": "medium",
}


def parse_bug_id(raw_id: str) -> UUID:
    """식별자 형식 검사 — Malformed ids are a 400, not a lookup miss."""
    try:
        return UUID(raw_id)
    except (ValueError, TypeError, AttributeError):
        raise BadRequestError("Invalid bug ID format")


def _to_columns(clean: dict[str, Any]) -> dict[str, Any]:
    """전체 교체용 컬럼 값 — Full column set; omitted optionals become None."""
    columns: dict[str, Any] = {}
    for wire_name, column in _COLUMNS.items():
        value = clean.get(wire_name)
        if value in (None, ""):
            value = _ENUM_DEFAULTS.get(wire_name)
        columns[column] = value
    return columns


class BugService:

    def build_response(self, bug: Bug) -> dict[str, Any]:
        bug_id: str = str(bug.id)
        return {
            "_id": bug_id,
            "id": bug_id,
            "title": bug.title,
            "description": bug.description,
            "severity": bug.severity,
            "status": bug.status,
            "priority": bug.priority,
            "reportedBy": bug.reported_by,
            "assignedTo": bug.assigned_to,
            "environment": bug.environment,
            "stepsToReproduce": bug.steps_to_reproduce,
            "createdAt": bug.created_at,
            "updatedAt": bug.updated_at,
        }

    def _clean_or_raise(self, raw: dict[str, Any]) -> dict[str, Any]:
        clean = sanitize_bug_data(raw)
        result = validate_bug_data(clean)
        if not result.is_valid:
            logger.info("Validation failed: %s", result.errors)
            raise ValidationFailedError(result.errors)
        return clean

    async def list_bugs(
        self,
        db: AsyncSession,
        filters: BugFilters,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[Sequence[Bug], int]:
        logger.info("Fetching bugs filters=%s page=%d limit=%d", filters.model_dump(exclude_none=True), page, limit)
        bugs, total = await bug_repository.get_filtered(
            db, filters.status, filters.severity, filters.priority, page, limit
        )
        logger.info("Found %d bugs out of %d total", len(bugs), total)
        return bugs, total

    async def get_bug(self, db: AsyncSession, raw_id: str) -> Bug:
        bug = await bug_repository.get_by_id(db, parse_bug_id(raw_id))
        if bug is None:
            logger.info("Bug %s not found", raw_id)
            raise NotFoundError(BUG_NOT_FOUND)
        return bug

    async def create_bug(self, db: AsyncSession, raw: dict[str, Any]) -> Bug:
        clean = self._clean_or_raise(raw)
        now = datetime.now(timezone.utc)
        data = _to_columns(clean)
        check_storage_limits(data)
        data["created_at"] = now
        data["updated_at"] = now
        bug = await bug_repository.create(db, data)
        logger.info("Bug created: %s", bug.id)
        return bug

    async def update_bug(self, db: AsyncSession, raw_id: str, raw: dict[str, Any]) -> Bug:
        bug_id = parse_bug_id(raw_id)
        clean = self._clean_or_raise(raw)
        data = _to_columns(clean)
        check_storage_limits(data)
        data["updated_at"] = datetime.now(timezone.utc)
        updated = await bug_repository.update(db, bug_id, data)
        if updated is None:
            logger.info("Bug %s not found for update", raw_id)
            raise NotFoundError(BUG_NOT_FOUND)
        logger.info("Bug updated: %s", bug_id)
        return updated

    async def delete_bug(self, db: AsyncSession, raw_id: str) -> None:
        bug_id = parse_bug_id(raw_id)
        deleted = await bug_repository.delete(db, bug_id)
        if not deleted:
            logger.info("Bug %s not found for deletion", raw_id)
            raise NotFoundError(BUG_NOT_FOUND)
        logger.info("Bug deleted: %s", bug_id)

    async def get_stats(self, db: AsyncSession) -> dict[str, int]:
        by_status = await bug_repository.count_by(db, "status")
        by_severity = await bug_repository.count_by(db, "severity")
        return {
            "total": sum(by_status.values()),
            "open": by_status.get("open", 0),
            "inProgress": by_status.get("in-progress", 0),
            "resolved": by_status.get("resolved", 0),
            "closed": by_status.get("closed", 0),
            "critical": by_severity.get("critical", 0),
        }


bug_service: BugService = BugService()

"""버그 레코드 SQLAlchemy ORM 모델 정의.

Bug record SQLAlchemy ORM model definition.
The model enforces storage-level constraints only (column lengths, non-null).
Business rules (enumerations, required-after-trim) live in
``bugtracker.utils.validation``.

Tables:
    - bugs: 버그 레코드 (Bug records with severity/status/priority)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, DateTime, Text, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from bugtracker.database import Base
from bugtracker.utils.exceptions import StorageConstraintError

# 컬럼별 저장 제한 — (max length, required message, too-long message)
_STORAGE_LIMITS: dict[str, tuple[int, str | None, str]] = {
    "title": (100, "Bug title is required", "Bug title cannot exceed 100 characters"),
    "description": (1000, "Bug description is required", "Bug description cannot exceed 1000 characters"),
    "reported_by": (50, "Reporter is required", "Reporter name cannot exceed 50 characters"),
    "assigned_to": (50, None, "Assigned to cannot exceed 50 characters"),
    "environment": (100, None, "Environment cannot exceed 100 characters"),
    "steps_to_reproduce": (2000, None, "Steps to reproduce cannot exceed 2000 characters"),
}


def _storage_error(column: str, value: str | None) -> str | None:
    max_length, required_message, too_long_message = _STORAGE_LIMITS[column]
    if value is None:
        return required_message
    if len(value) > max_length:
        return too_long_message
    return None


def check_storage_limits(columns: dict[str, Any]) -> None:
    """컬럼 값 전체의 저장 제한 검사 — 위반 메시지를 모두 모아 한 번에 발생.

    Check every limited column present in ``columns`` and raise a single
    ``StorageConstraintError`` listing all violations, in column order.
    """
    messages: list[str] = []
    for column in _STORAGE_LIMITS:
        if column in columns:
            message = _storage_error(column, columns[column])
            if message is not None:
                messages.append(message)
    if messages:
        raise StorageConstraintError(messages)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Bug(Base):
    """버그 모델 — 단일 컬렉션 이슈 트래커의 유일한 엔티티.

    Bug model — the sole entity of the tracker.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier, assigned on insert)
        title: 제목 (Title, max 100 chars)
        description: 상세 설명 (Description, max 1000 chars)
        severity: 심각도 (low/medium/high/critical)
        status: 진행 상태 (open/in-progress/resolved/closed)
        priority: 우선순위 (low/medium/high)
        reported_by: 보고자 (Reporter name, max 50 chars)
        assigned_to: 담당자 (Assignee, optional, max 50 chars)
        environment: 발생 환경 (Environment, optional, max 100 chars)
        steps_to_reproduce: 재현 절차 (Reproduction steps, optional, max 2000 chars)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "bugs"
    __table_args__ = (
        Index("ix_bugs_status", "status"),
        Index("ix_bugs_severity", "severity"),
        Index("ix_bugs_priority", "priority"),
        Index("ix_bugs_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    reported_by: Mapped[str] = mapped_column(String(50), nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(50), nullable=True)
    environment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    steps_to_reproduce: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @validates(*_STORAGE_LIMITS)
    def _check_storage_limit(self, key: str, value: str | None) -> str | None:
        # 단일 속성 대입 — bulk writes go through check_storage_limits first
        message = _storage_error(key, value)
        if message is not None:
            raise StorageConstraintError([message])
        return value

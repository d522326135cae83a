"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and test
schema creation.

Modules:
    bug: 버그 레코드 (Bug records)
"""

from bugtracker.models.bug import Bug, check_storage_limits

__all__ = ["Bug", "check_storage_limits"]

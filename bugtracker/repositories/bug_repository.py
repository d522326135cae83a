"""버그 레포지토리.

Bug repository — Handles bugs table queries.
"""

from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugtracker.models.bug import Bug
from bugtracker.repositories.base import BaseRepository


class BugRepository(BaseRepository[Bug]):

    def __init__(self) -> None:
        super().__init__(Bug)

    async def get_filtered(
        self,
        db: AsyncSession,
        status: str | None = None,
        severity: str | None = None,
        priority: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Bug], int]:
        query: Select = select(Bug).order_by(Bug.created_at.desc())
        query = self.apply_filters(
            query, {"status": status, "severity": severity, "priority": priority}
        )
        return await self.get_paginated(db, query, page, per_page)

    async def count_by(self, db: AsyncSession, column_name: str) -> dict[str, int]:
        """컬럼 값별 개수 — Row counts grouped by one column."""
        column = getattr(Bug, column_name)
        result = await db.execute(select(column, func.count()).group_by(column))
        return {value: count for value, count in result.all()}


bug_repository: BugRepository = BugRepository()

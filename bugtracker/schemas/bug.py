"""버그 Pydantic 스키마.

Bug request schemas. Field names on the wire are camelCase; every field is
optional here because the business rules run afterwards in
``bugtracker.utils.validation`` and report all failures together.
"""

from pydantic import BaseModel, ConfigDict, Field


class BugPayload(BaseModel):
    """생성/수정 공용 요청 본문 — Create and replace-update request body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    severity: str | None = None  # low, medium, high, critical
    status: str | None = None  # open, in-progress, resolved, closed
    priority: str | None = None  # low, medium, high
    reported_by: str | None = Field(default=None, alias="reportedBy")
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    environment: str | None = None
    steps_to_reproduce: str | None = Field(default=None, alias="stepsToReproduce")

    def to_wire(self) -> dict:
        """전달된 필드만 camelCase 딕셔너리로 — Only the fields the caller sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class BugFilters(BaseModel):
    """목록 조회 필터 — List filters; empty values mean "no filter"."""

    status: str | None = None
    severity: str | None = None
    priority: str | None = None

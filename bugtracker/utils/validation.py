"""버그 입력 정제 및 검증 모듈 — API와 화면 계층이 공유.

Bug input sanitization and validation, shared by the API layer and the HTML
pages. The API always re-runs these rules regardless of what the form already
checked; both paths import this one module so their messages cannot drift.

Usage:
    clean = sanitize_bug_data(raw)
    result = validate_bug_data(clean)
    if not result.is_valid:
        raise ValidationFailedError(result.errors)
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

SEVERITIES: tuple[str, ...] = ("low", "medium", "high", "critical")
STATUSES: tuple[str, ...] = ("open", "in-progress", "resolved", "closed")
PRIORITIES: tuple[str, ...] = ("low", "medium", "high")

TITLE_MAX_LENGTH: int = 100
DESCRIPTION_MAX_LENGTH: int = 1000

# 정제 대상 자유 텍스트 필드 — Free-text fields sanitized before validation
TEXT_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "reportedBy",
    "assignedTo",
    "environment",
    "stepsToReproduce",
)

_SCRIPT_BLOCK = re.compile(r"<script.*?>.*?</script>", re.IGNORECASE | re.DOTALL)
_EVENT_HANDLER = re.compile(r'\s*on\w+="[^"]*"', re.IGNORECASE)
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


@dataclass(frozen=True)
class ValidationResult:
    """검증 결과 — valid iff errors is empty."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _strip_markup(text: str) -> str:
    text = _SCRIPT_BLOCK.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return _JAVASCRIPT_SCHEME.sub("", text)


def sanitize_input(value: Any) -> Any:
    """위험한 마크업 제거 — Strip script blocks, inline handlers and ``javascript:``.

    Non-string values are returned unchanged. Removals are repeated until the
    text is stable, so a removal that splices a new match together is caught
    too and the function is idempotent.
    """
    if not isinstance(value, str):
        return value

    previous: str | None = None
    sanitized: str = value
    while sanitized != previous:
        previous = sanitized
        sanitized = _strip_markup(sanitized)
    return sanitized.strip()


def sanitize_bug_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """자유 텍스트 필드만 정제한 사본을 반환합니다.

    Return a copy of ``data`` with every free-text field sanitized.
    Absent fields stay absent; other keys are passed through.
    """
    sanitized: dict[str, Any] = dict(data)
    for name in TEXT_FIELDS:
        if name in sanitized:
            sanitized[name] = sanitize_input(sanitized[name])
    return sanitized


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def validate_bug_data(data: Mapping[str, Any]) -> ValidationResult:
    """버그 후보 레코드를 검증합니다.

    Validate a candidate bug record (any field may be absent).
    Every rule is evaluated; all applicable errors are collected in one pass.

    Args:
        data: camelCase 필드명을 가진 후보 레코드 (Candidate record, camelCase keys)

    Returns:
        ValidationResult: 오류 메시지 목록 (Collected error messages)
    """
    errors: list[str] = []

    title = data.get("title")
    if _is_blank(title):
        errors.append("Title is required")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")

    description = data.get("description")
    if _is_blank(description):
        errors.append("Description is required")
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

    severity = data.get("severity")
    if _is_present(severity) and severity not in SEVERITIES:
        errors.append("Severity must be: low, medium, high, or critical")

    status = data.get("status")
    if _is_present(status) and status not in STATUSES:
        errors.append("Status must be: open, in-progress, resolved, or closed")

    priority = data.get("priority")
    if _is_present(priority) and priority not in PRIORITIES:
        errors.append("Priority must be: low, medium, or high")

    # 길이 제한은 저장 계층(ORM 모델)이 담당 — Length limit enforced by the model
    if _is_blank(data.get("reportedBy")):
        errors.append("Reporter is required")

    return ValidationResult(errors=errors)

"""페이지네이션 유틸리티 모듈.

Pagination utility module.
Provides the pagination metadata model returned by list endpoints and the
lenient query-parameter parsing used for ``page`` and ``limit``.
"""

import math
import re

from pydantic import BaseModel

_LEADING_INT = re.compile(r"\s*\+?(\d+)")

# 페이지 번호 상한 — keeps OFFSET inside a signed 64-bit integer
MAX_PAGE: int = 10_000_000


class Pagination(BaseModel):
    """페이지네이션 메타데이터 모델.

    Pagination metadata for list responses.

    Attributes:
        page: 현재 페이지 번호 (Current page number, 1-based)
        limit: 페이지당 항목 수 (Items per page)
        total: 전체 항목 수 (Total count across all pages)
        pages: 전체 페이지 수 (Total number of pages, ceil(total/limit))
    """

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


def parse_positive_int(value: str | None, default: int, maximum: int) -> int:
    """쿼리 문자열의 선행 정수를 읽고, 없거나 1 미만이면 기본값.

    Read the leading integer of a query-string value ("3", "3abc");
    fall back to ``default`` when missing, non-numeric or below 1, and
    clamp anything above ``maximum`` down to it.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    digits: str = match.group(1).lstrip("0")
    # 자릿수로 먼저 비교 — huge inputs never become huge ints
    if len(digits) > len(str(maximum)):
        return maximum
    number: int = int(digits or "0")
    if number < 1:
        return default
    return min(number, maximum)

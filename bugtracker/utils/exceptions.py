"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error taxonomy of the
bug API. The global handlers in ``bugtracker.api.error_handlers`` render every
one of them as ``{"success": false, "message": ..., "errors": [...]}``.

Usage:
    from bugtracker.utils.exceptions import NotFoundError, ValidationFailedError
    raise NotFoundError("Bug not found")
    raise ValidationFailedError(["Title is required"])
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when the identifier is well-formed but no record exists for it.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for client-input errors that are not field validation failures,
    e.g. an identifier that is not a valid UUID.

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationFailedError(HTTPException):
    """400 검증 실패 예외 — 필드 규칙 위반 목록을 함께 전달.

    400 validation failure carrying the full list of error messages.

    Args:
        errors: 사람이 읽을 수 있는 오류 메시지 목록 (Human-readable messages)
        detail: 요약 메시지 (Summary message, default: "Validation failed")
    """

    def __init__(self, errors: list[str], detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.errors: list[str] = list(errors)


class StorageConstraintError(ValueError):
    """저장 계층 제약 위반 — ORM 모델 검사에서 발생.

    Raised by the ORM model when values break storage-level limits
    (column length, non-null). Carries every violated limit's message.

    Args:
        messages: 위반된 제약 메시지 목록 (Storage-level messages, at least one)
    """

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages: list[str] = list(messages)

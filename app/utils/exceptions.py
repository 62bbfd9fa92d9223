"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the issue API error
taxonomy. These simplify error raising across services by eliminating the
need to specify status codes at each call site.

Usage:
    from app.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Issue not found")
    raise ValidationError(failure.to_list())
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 이슈를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested issue does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Issue not found")
    """

    def __init__(self, detail: str = "Issue not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Base class for request errors reported to the client with status 400.

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(BadRequestError):
    """400 검증 실패 예외 — 필드별 오류 목록을 포함.

    400 validation failure carrying per-field errors
    (missing, oversized, invalid choice, or an empty update payload).

    Args:
        errors: 필드 오류 목록 [{field, kind, message}] (Per-field error dicts)
        detail: 오류 메시지 (Error message, default: "Validation failed")
    """

    def __init__(self, errors: list[dict[str, Any]], detail: str = "Validation failed") -> None:
        super().__init__(detail=detail)
        self.errors: list[dict[str, Any]] = errors


class InvalidIdError(BadRequestError):
    """400 잘못된 식별자 예외 — Malformed issue identifier."""

    def __init__(self, detail: str = "Invalid issue ID") -> None:
        super().__init__(detail=detail)


class ServerError(HTTPException):
    """500 서버 오류 예외 — 저장소 실패 등 분류되지 않은 오류.

    500 Internal Server Error exception.
    Raised when a repository call fails. The detail is only shown to
    clients in development; see app.error_handlers.

    Args:
        detail: 오류 메시지 (Error message, default: "Internal server error")
    """

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

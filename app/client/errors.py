"""API 클라이언트 오류 분류.

API client error taxonomy.
Failures without a server response (NetworkError, RequestTimeout) are the
only ones the transport retries. A response that cannot be used (redirect
loops, undecodable or non-JSON bodies) is an InvalidResponse. Failures with
a structured server response are classified by status code and surfaced immediately.
"""

from typing import Any

import httpx


class ApiError(Exception):
    """모든 클라이언트 오류의 부모 — Base class for every client failure."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.status_code: int | None = status_code
        self.payload: Any = payload


class NetworkError(ApiError):
    """응답 없음 — No response was received."""

    def __init__(self, message: str = "Network error. Please check your connection.") -> None:
        super().__init__(message)


class RequestTimeout(NetworkError):
    """시간 초과 — The request exceeded the fixed timeout."""

    def __init__(self, message: str = "Request timeout. Please check your connection.") -> None:
        super().__init__(message)


class InvalidResponse(ApiError):
    """응답을 해석할 수 없음 — A response arrived but could not be used."""

    def __init__(self, message: str = "Invalid response from server.", status_code: int | None = None) -> None:
        super().__init__(message, status_code)


class ApiStatusError(ApiError):
    """서버가 오류 상태 코드로 응답 — The server answered with an error status."""

    @property
    def errors(self) -> list[dict[str, Any]]:
        if isinstance(self.payload, dict):
            return list(self.payload.get("errors") or [])
        return []


class BadRequest(ApiStatusError):
    pass


class NotFound(ApiStatusError):
    pass


class RateLimited(ApiStatusError):
    pass


class ServerFailure(ApiStatusError):
    pass


def from_transport_error(exc: httpx.TransportError) -> NetworkError:
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeout()
    return NetworkError()


def decode_json(response: httpx.Response) -> Any:
    """성공 응답 본문 해석 — Decode a success body, or raise InvalidResponse."""
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidResponse(status_code=response.status_code) from exc


def classify_response(response: httpx.Response) -> ApiStatusError:
    """오류 응답을 종류별 예외로 변환합니다.

    Convert an error response into the matching ApiStatusError subclass.

    Args:
        response: 4xx/5xx 응답 (Error response)

    Returns:
        ApiStatusError: 분류된 예외 (Classified exception, not raised)
    """
    try:
        payload: Any = response.json()
    except ValueError:
        payload = None
    detail = payload.get("detail") if isinstance(payload, dict) else None
    detail = detail if isinstance(detail, str) and detail else None

    code = response.status_code
    if code == 400:
        return BadRequest(detail or "Invalid request data", code, payload)
    if code == 404:
        return NotFound("Resource not found", code, payload)
    if code == 429:
        return RateLimited("Too many requests. Please try again later.", code, payload)
    if code >= 500:
        return ServerFailure("Server error. Please try again later.", code, payload)
    return ApiStatusError(detail or f"Request failed with status {code}", code, payload)

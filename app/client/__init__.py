"""이슈 API 클라이언트 패키지.

Issue API client package — Cached, retrying transport plus the optimistic
reconciliation layer for client-held issue collections.
"""

from app.client.cache import CachedEntry, ResponseCache
from app.client.errors import (
    ApiError,
    ApiStatusError,
    BadRequest,
    InvalidResponse,
    NetworkError,
    NotFound,
    RateLimited,
    RequestTimeout,
    ServerFailure,
)
from app.client.reconciliation import CollectionState, IssueCollection
from app.client.transport import IssueApiClient

__all__ = [
    "ApiError",
    "ApiStatusError",
    "BadRequest",
    "CachedEntry",
    "CollectionState",
    "IssueApiClient",
    "IssueCollection",
    "InvalidResponse",
    "NetworkError",
    "NotFound",
    "RateLimited",
    "RequestTimeout",
    "ResponseCache",
    "ServerFailure",
]

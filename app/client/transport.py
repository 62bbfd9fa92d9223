"""비동기 이슈 API 클라이언트.

Async issue API client built on httpx.

Features:
- Fixed per-request timeout
- Read caching through an owned ResponseCache (successful GETs only)
- Exactly one retry, after a fixed delay, when no response was received
- Error classification for structured server responses (never retried)
- Cache invalidation of the affected views after every successful write

Example:
    async with IssueApiClient() as api:
        page = await api.list_issues(status="Open", page=1)
"""

import asyncio
import logging
import time
from typing import Any

import httpx

from app.client.cache import ResponseCache, make_cache_key
from app.client.errors import (
    ApiError,
    InvalidResponse,
    NetworkError,
    classify_response,
    decode_json,
    from_transport_error,
)
from app.config import ClientSettings

logger = logging.getLogger(__name__)

# 첫 시도 + 재시도 1회 — First attempt plus one retry
MAX_ATTEMPTS: int = 2


class IssueApiClient:
    """이슈 API 비동기 클라이언트.

    Attributes:
        base_url: 이슈 컬렉션 URL (URL of the issues collection)
        cache: 읽기 응답 캐시 (Read response cache owned by this client)
        retry_delay: 재시도 전 대기(초) (Seconds to wait before the retry)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        cache: ResponseCache | None = None,
        timeout: float | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        config: ClientSettings | None = None,
    ) -> None:
        config = config or ClientSettings()
        self.base_url: str = (base_url or config.API_URL).rstrip("/")
        self.cache: ResponseCache = cache or ResponseCache(config.CACHE_MAX_ENTRIES, config.CACHE_TTL)
        self.retry_delay: float = config.RETRY_DELAY if retry_delay is None else retry_delay
        self._http: httpx.AsyncClient = httpx.AsyncClient(
            timeout=config.TIMEOUT if timeout is None else timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "IssueApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _url(self, path: str = "") -> str:
        return f"{self.base_url}{path}"

    async def _send(
        self,
        method: str,
        path: str = "",
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """요청 전송 — 응답이 없을 때만 1회 재시도.

        Send a request. Only failures without a response are retried, once,
        after `retry_delay`; error responses raise their classified ApiError.
        """
        url = self._url(path)
        query = {k: v for k, v in (params or {}).items() if v is not None}
        started = time.perf_counter()

        attempt = 1
        while True:
            try:
                response = await self._http.request(method, url, params=query or None, json=json)
            except httpx.TransportError as exc:
                error: NetworkError = from_transport_error(exc)
                if attempt < MAX_ATTEMPTS:
                    attempt += 1
                    logger.warning("Retrying %s %s after network error: %s", method, url, exc)
                    await asyncio.sleep(self.retry_delay)
                    continue
                logger.error(
                    "%s %s failed after %.0fms: %s",
                    method, url, (time.perf_counter() - started) * 1000, error.message,
                )
                raise error from exc
            except httpx.RequestError as exc:
                # 응답은 있었지만 사용할 수 없음, 재시도하지 않음 (Unusable response, not retried)
                logger.error("%s %s returned an unusable response: %s", method, url, exc)
                raise InvalidResponse() from exc

            duration_ms = (time.perf_counter() - started) * 1000
            if response.is_success:
                logger.debug("%s %s -> %s in %.0fms", method, url, response.status_code, duration_ms)
                return response

            failure = classify_response(response)
            logger.error(
                "%s %s failed after %.0fms: %s %s",
                method, url, duration_ms, response.status_code, failure.message,
            )
            raise failure

    async def _get(self, path: str = "", params: dict[str, Any] | None = None, bypass_cache: bool = False) -> Any:
        key = make_cache_key(self._url(path), params)
        if not bypass_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached.json()

        response = await self._send("GET", path, params=params)
        data = decode_json(response)
        if response.status_code == 200:
            self.cache.put(key, response.content, response.headers)
        return data

    def invalidate_after_write(self, issue_id: str | None = None) -> int:
        """쓰기 후 목록/통계/해당 이슈 캐시 무효화 — Drop list, stats and item views."""
        dropped = self.cache.invalidate(self._url("?"))
        dropped += self.cache.invalidate(self._url("/stats/"))
        if issue_id is not None:
            dropped += self.cache.invalidate(self._url(f"/{issue_id}?"))
        return dropped

    async def list_issues(self, *, bypass_cache: bool = False, **params: Any) -> dict[str, Any]:
        """이슈 목록 — page, limit, status, priority, search, sortBy, sortOrder."""
        return await self._get("", params, bypass_cache)

    async def get_issue(self, issue_id: str, *, bypass_cache: bool = False) -> dict[str, Any]:
        return await self._get(f"/{issue_id}", None, bypass_cache)

    async def get_stats(self, *, bypass_cache: bool = False) -> dict[str, Any]:
        return await self._get("/stats/summary", None, bypass_cache)

    async def create_issue(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._send("POST", json=payload)
        self.invalidate_after_write()
        return decode_json(response)

    async def update_issue(self, issue_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        response = await self._send("PUT", f"/{issue_id}", json=changes)
        self.invalidate_after_write(issue_id)
        return decode_json(response)

    async def delete_issue(self, issue_id: str) -> dict[str, Any]:
        response = await self._send("DELETE", f"/{issue_id}")
        self.invalidate_after_write(issue_id)
        return decode_json(response)

    async def health_check(self) -> dict[str, Any]:
        """API 상태 확인 — Round-trip a one-item list request, bypassing the cache."""
        started = time.perf_counter()
        try:
            await self._send("GET", params={"limit": 1})
        except ApiError as exc:
            return {"status": "unhealthy", "error": exc.message, "timestamp": time.time()}
        return {
            "status": "healthy",
            "latency": round((time.perf_counter() - started) * 1000, 2),
            "timestamp": time.time(),
        }

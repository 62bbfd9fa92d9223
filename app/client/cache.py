"""클라이언트 응답 캐시.

Client response cache — A bounded, time-expiring cache of successful read
responses, keyed by the full request identity (URL plus query string).

Eviction is by insertion order: once the bound is exceeded the
earliest-inserted key goes first, regardless of how recently it was read.
Stale entries read as a miss but stay in place until capacity pressure or
an explicit clear/invalidate removes them.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import urlencode


def make_cache_key(url: str, params: Mapping[str, Any] | None = None) -> str:
    """URL과 쿼리 파라미터로 캐시 키 생성 — Build a key from URL and sorted query params.

    Keys always contain "?" so `invalidate(collection_url + "?")` matches
    every list view of a collection and nothing below it.
    """
    items = sorted((k, str(v)) for k, v in (params or {}).items() if v is not None)
    return f"{url}?{urlencode(items)}"


@dataclass(frozen=True)
class CachedEntry:
    content: bytes  # 원본 응답 본문 (Raw response body)
    timestamp: float
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        # 호출마다 새 객체로 디코딩 (Fresh objects per call; callers may mutate them)
        return json.loads(self.content)


class ResponseCache:
    """삽입 순서 기반의 TTL 캐시.

    Attributes:
        max_entries: 최대 항목 수 (Capacity)
        ttl: 유효 시간(초) (Seconds before an entry is stale)
    """

    def __init__(
        self,
        max_entries: int = 50,
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries: int = max_entries
        self.ttl: float = ttl
        self._clock: Callable[[], float] = clock
        self._entries: dict[str, CachedEntry] = {}

    @property
    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def get(self, key: str) -> CachedEntry | None:
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.timestamp >= self.ttl:
            return None
        return entry

    def put(self, key: str, content: bytes, headers: Mapping[str, str] | None = None) -> CachedEntry:
        # 기존 키 갱신은 삽입 위치를 유지 (Re-putting a key keeps its insertion position)
        entry = CachedEntry(content=content, timestamp=self._clock(), headers=dict(headers or {}))
        self._entries[key] = entry
        while len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def invalidate(self, pattern: str) -> int:
        """패턴을 포함하는 모든 키 삭제 — Drop every key containing `pattern`; returns the count."""
        doomed = [key for key in self._entries if pattern in key]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

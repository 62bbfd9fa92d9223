"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures request/response data for the issue API and sends one structured
event per request to Axiom: method, path, issue id, query parameters,
request body, status code, duration and error reason.
Reporter names are masked before leaving the process.
"""

import json
import logging
import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from axiom_py import Client as AxiomClient

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(r"(reportedBy|reported_by|authorization|token)", re.IGNORECASE)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

# /api/issues/{id} 경로에서 이슈 ID 추출 — Issue id from item paths
_ISSUE_PATH = re.compile(r"^/api/issues/(?!stats/)([^/]+)$")

_MAX_BODY_CHARS: int = 2000
_MAX_ERROR_CHARS: int = 500


def _mask(data: Any) -> Any:
    """민감 필드 마스킹 — Mask sensitive top-level fields of a JSON object."""
    if isinstance(data, dict):
        return {k: "***" if _SENSITIVE_KEYS.search(k) else v for k, v in data.items()}
    return data


def _truncate(value: str, max_len: int) -> str:
    return value if len(value) <= max_len else value[:max_len] + "...(truncated)"


def _error_reason(body: bytes) -> str:
    """에러 응답 본문에서 사유 추출 — Extract the reason from an error body."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _truncate(body.decode("utf-8", errors="replace"), _MAX_ERROR_CHARS)
    reason = data.get("detail", data) if isinstance(data, dict) else data
    if isinstance(data, dict) and data.get("errors"):
        reason = {"detail": reason, "errors": data["errors"]}
    return _truncate(reason if isinstance(reason, str) else json.dumps(reason), _MAX_ERROR_CHARS)


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 이슈 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs issue API requests and responses to Axiom.
    Passes requests straight through when Axiom is not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _mask(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _build_event(self, request: Request, request_body: Any) -> dict[str, Any]:
        path = request.url.path
        event: dict[str, Any] = {"method": request.method, "path": path}
        match = _ISSUE_PATH.match(path)
        if match:
            event["issue_id"] = match.group(1)
        if request.query_params:
            event["query_params"] = dict(request.query_params)
        if request_body is not None:
            serialized = request_body if isinstance(request_body, str) else json.dumps(request_body)
            event["request_body"] = _truncate(serialized, _MAX_BODY_CHARS)
        return event

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 및 Axiom 미설정시 패스스루 — Skip excluded paths or unconfigured Axiom
        if request.url.path in _SKIP_PATHS or self._client is None:
            return await call_next(request)

        start_time = time.perf_counter()
        event = self._build_event(request, await self._read_body(request))
        status_code: int = 500

        try:
            response = await call_next(request)
            status_code = response.status_code

            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_reason(resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception:
                # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
                logger.warning("Axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)

        return response

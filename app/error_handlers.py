"""FastAPI 예외 핸들러.

Custom exception handlers for FastAPI.
Every error response has the shape {"detail": ..., "errors": [...]} where
"errors" is only present for validation failures. 500 responses hide the
underlying message unless the app runs in development.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings
from app.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

_GENERIC_SERVER_ERROR: str = "Internal server error"


def _server_detail(detail: str) -> str:
    return detail if settings.is_development else _GENERIC_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        content: dict = {"detail": exc.detail}
        if isinstance(exc, ValidationError):
            content["errors"] = exc.errors
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
            content["detail"] = _server_detail(str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # 쿼리/경로 파라미터 타입 오류도 400으로 통일 (Parameter type errors are 400 too)
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "body",
                "kind": "invalid_type",
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _server_detail(f"{type(exc).__name__}: {exc}")},
        )

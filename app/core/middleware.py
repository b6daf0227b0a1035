# app/core/middleware.py
"""
HTTP middleware for the FastAPI application.

Every request gets an ``X-Request-ID`` (taken from the caller when
present) and an ``X-Process-Time`` header; completions are logged with
the acting user, and 4xx/5xx responses are logged as warnings.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"


def _request_context(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", "unknown"),
        "method": request.method,
        "url": str(request.url.path),
        "actor_id": request.headers.get("X-Actor-Id"),
        "client_host": request.client.host if request.client else None,
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns the request id, times the request and logs the outcome."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request processing failed: {exc}",
                extra={**_request_context(request), "error_type": type(exc).__name__},
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        response.headers[self.header_name] = request.state.request_id
        response.headers[PROCESS_TIME_HEADER] = f"{process_time:.4f}"

        context = {
            **_request_context(request),
            "status_code": response.status_code,
            "process_time": f"{process_time:.4f}s",
        }
        if response.status_code >= 400:
            logger.warning(f"Request returned error status {response.status_code}", extra=context)
        else:
            logger.info("Request completed", extra=context)
        return response


def register_middlewares(app: FastAPI) -> None:
    """Attach the request context middleware to ``app``."""
    app.add_middleware(RequestContextMiddleware)
    logger.info("Registered RequestContextMiddleware")


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


__all__ = [
    "RequestContextMiddleware",
    "register_middlewares",
    "get_request_id",
]

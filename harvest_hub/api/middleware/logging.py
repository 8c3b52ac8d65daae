# 📄 File: harvest_hub/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request made to the app: what was asked for, how it went, and
# how long it took.
# 🧪 Purpose (Technical Summary):
# Request logging middleware that assigns or propagates an X-Request-ID, binds it to the
# logging context for the duration of the request, and logs method, path, status and
# latency, with slow requests raised to WARNING.
# 🔗 Dependencies:
# FastAPI, starlette BaseHTTPMiddleware, harvest_hub.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# harvest_hub.main (middleware registration outside the test environment)

import logging
import time
import uuid
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from harvest_hub.shared.utils.logging import bind_request_id, request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

EXCLUDED_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Features:
    - Request correlation through X-Request-ID
    - Request timing
    - Slow request warnings
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = self._get_or_create_request_id(request)
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"HTTP {request.method} {request.url.path} - failed - {duration_ms:.0f}ms")
            raise
        finally:
            request_id_var.reset(token)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        if request.url.path not in EXCLUDED_PATHS:
            level = logging.WARNING if duration_ms >= self.slow_request_threshold * 1000 else logging.INFO
            logger.log(
                level,
                f"HTTP {request.method} {request.url.path} - {response.status_code} - {duration_ms:.0f}ms",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )
        return response

    @staticmethod
    def _get_or_create_request_id(request: Request) -> str:
        existing: Optional[str] = request.headers.get(REQUEST_ID_HEADER)
        return existing or str(uuid.uuid4())


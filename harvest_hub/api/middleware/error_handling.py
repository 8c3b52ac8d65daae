# 📄 File: harvest_hub/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# The last safety net: if something breaks in a way nobody planned for, this turns the
# crash into a polite "Something went wrong!" reply instead of a broken connection.
# 🧪 Purpose (Technical Summary):
# Global fallback middleware that catches exceptions escaping the route exception
# handlers, logs them with request context and a traceback, and returns the generic
# 500 error envelope with request correlation headers.
# 🔗 Dependencies:
# FastAPI, starlette BaseHTTPMiddleware, traceback, uuid
# 🔄 Connected Modules / Calls From:
# harvest_hub.main (middleware registration)

import logging
import time
import traceback
import uuid
from typing import Any, Dict, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from harvest_hub.shared.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the Harvest Hub API.

    Known application errors are rendered by the exception handlers in
    main.py; anything that still escapes the route becomes a generic 500.
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc, request_id, start_time)

        response.headers["X-Request-ID"] = request_id
        return response

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
        request_id: str,
        start_time: float,
    ) -> JSONResponse:
        processing_time = time.perf_counter() - start_time
        self._log_error(request, exc, request_id)

        content: Dict[str, Any] = {
            "success": False,
            "error": GENERIC_ERROR_MESSAGE,
            "code": "INTERNAL_SERVER_ERROR",
        }

        # Add debug information in development
        if self.settings.DEBUG and not self.settings.is_production:
            content["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split("\n"),
            }

        response = JSONResponse(status_code=500, content=content)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{processing_time:.3f}s"
        return response

    def _log_error(self, request: Request, exc: Exception, request_id: str) -> None:
        log_context = {
            "request_id": request_id,
            "method": request.method,
            "path": str(request.url.path),
            "client_ip": request.client.host if request.client else None,
            "exception_type": type(exc).__name__,
        }

        user = getattr(request.state, "user", None)
        if user is not None:
            log_context["user_id"] = getattr(user, "id", None)

        logger.error(
            f"Server error in {request.method} {request.url.path}: {exc}",
            extra=log_context,
            exc_info=True,
        )

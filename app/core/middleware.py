# app/core/middleware.py
from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.errors import error_response, log_failure
from app.core.request_context import request_id_ctx

log = logging.getLogger("recipe_catalog.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        start = time.perf_counter()

        status_code = 500
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # Unhandled errors get the same envelope and request id as handled ones
                status_code, body = error_response(exc)
                log_failure(request, exc, status_code)
                response = JSONResponse(status_code=status_code, content=body)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )
            request_id_ctx.reset(token)

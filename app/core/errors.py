# app/core/errors.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.request_context import get_request_id

log = logging.getLogger("recipe_catalog.errors")


class CatalogError(Exception):
    """Base class for failures raised by the search core."""


class InvalidFilterError(CatalogError):
    def __init__(self, field: str, value: str, reason: str = "not a number"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {field} filter {value!r}: {reason}")


class StoreError(CatalogError):
    """The record store could not be reached or a query failed."""


class StoreTimeoutError(StoreError):
    pass


def error_response(exc: Exception) -> tuple[int, dict[str, Any]]:
    """
    Map an exception to (status_code, body).
    Invalid filters are the caller's fault (400); everything else is ours (500).
    """
    if isinstance(exc, InvalidFilterError):
        return 400, {"success": False, "message": "Invalid filter", "error": str(exc)}
    return 500, {"success": False, "message": "Server Error", "error": str(exc)}


def log_failure(request: Request, exc: Exception, status_code: int) -> None:
    extra = {
        "request_id": get_request_id(),
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
    }
    if status_code >= 500:
        log.error("request failed", exc_info=exc, extra=extra)
    else:
        log.warning("request rejected: %s", exc, extra=extra)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def _catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        status_code, body = error_response(exc)
        log_failure(request, exc, status_code)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        status_code, body = error_response(exc)
        log_failure(request, exc, status_code)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"success": False, "message": "Route not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
        )

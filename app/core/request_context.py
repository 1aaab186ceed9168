# app/core/request_context.py
from __future__ import annotations

import contextvars

# Set by RequestLoggingMiddleware for the lifetime of one request
request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "recipe_catalog_request_id", default=None
)


def get_request_id() -> str | None:
    return request_id_ctx.get()

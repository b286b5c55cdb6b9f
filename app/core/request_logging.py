from __future__ import annotations

import logging
import re
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,128}")
_LOG = logging.getLogger("app.http")


def resolve_request_id(raw: str | None) -> str:
    """Reuse a well-formed caller id, otherwise mint one."""
    value = (raw or "").strip()
    return value if _REQUEST_ID_RE.fullmatch(value) else uuid4().hex


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _request_logging_middleware(request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started_at = perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        # Search requests are identified by their filters, so keep the query string.
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        _LOG.log(
            level,
            "%s %s -> %s in %.1fms [%s]",
            request.method,
            target,
            response.status_code,
            (perf_counter() - started_at) * 1000.0,
            request_id,
        )
        return response

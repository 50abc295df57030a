from __future__ import annotations

import logging
import re
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
_LOG = logging.getLogger("bookstore.http")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    # Catalog rows change on every write.
    "Cache-Control": "no-store",
}


def request_id_from_header(raw: str | None) -> str:
    """Reuse a caller's well-formed request id, otherwise mint one."""
    value = (raw or "").strip()
    return value if _REQUEST_ID_RE.fullmatch(value) else uuid4().hex


class CatalogRequestMiddleware(BaseHTTPMiddleware):
    """Tags each exchange with a request id, fixed headers and one access log line."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started_at = perf_counter()

        response = await call_next(request)

        response.headers.update(SECURITY_HEADERS)
        response.headers[REQUEST_ID_HEADER] = request_id
        _LOG.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "%s %s%s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            f"?{request.url.query}" if request.url.query else "",
            response.status_code,
            (perf_counter() - started_at) * 1000.0,
            request_id,
        )
        return response


def install_http_hardening(app: FastAPI) -> None:
    app.add_middleware(CatalogRequestMiddleware)

from __future__ import annotations
import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("apigateway")

MAX_REQUEST_ID_LENGTH = 128


def _request_id(request: Request) -> str:
    given = (request.headers.get("x-request-id") or "").strip()
    if given and len(given) <= MAX_REQUEST_ID_LENGTH and given.isprintable():
        return given
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (echoed as x-request-id) and logs one
    start/end pair per request. Bodies and the Authorization header are
    never logged: they carry passwords and bearer tokens.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        request_id = _request_id(request)
        request.state.request_id = request_id
        fields = {"request_id": request_id, "method": request.method, "path": request.url.path}

        logger.info("request.start", extra=fields)
        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception("request.exception", extra={**fields, "duration_ms": _elapsed_ms(started)})
            raise
        response.headers["x-request-id"] = request_id
        logger.info(
            "request.end",
            extra={**fields, "status": response.status_code, "duration_ms": _elapsed_ms(started)},
        )
        return response


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)

"""Request ID propagation.

A well-formed ``X-Request-ID`` sent by the client is reused; anything else
is replaced by a fresh UUID. The ID is echoed on the response, stored on
``request.state`` for the routes and published through ``request_id_var``
so log records and error envelopes can carry it.
"""

import re
from typing import Callable, Optional
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hrpulse.utils.logger import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{8,128}$")


def is_valid_request_id(request_id: Optional[str]) -> bool:
    """Whether a client-supplied ID is safe to echo and log."""
    return bool(request_id) and _REQUEST_ID_PATTERN.match(request_id) is not None


def get_request_id() -> Optional[str]:
    return request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign every request an ID."""

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = REQUEST_ID_HEADER,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ):
        super().__init__(app)
        self.header_name = header_name
        self.id_factory = id_factory

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(self.header_name)
        if is_valid_request_id(incoming):
            request_id = incoming
        else:
            if incoming:
                logger.warning(f"Discarding malformed {self.header_name} header")
            request_id = self.id_factory()

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = request_id
        return response


__all__ = ["RequestIDMiddleware", "REQUEST_ID_HEADER", "get_request_id", "is_valid_request_id"]

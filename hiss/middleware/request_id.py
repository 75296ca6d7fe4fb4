"""
HISS Backend — Request ID Middleware
=====================================

What:  Tags each request with a short correlation ID and echoes it back in
       the X-Request-ID response header.
Why:   Error bodies carry the same ID, so a message reported by an annotator
       can be matched to the server log lines of that request.

Unhandled exceptions:
    Starlette runs the app's catch-all `Exception` handler in its outermost
    middleware, after this one has already unwound. Errors that no handler
    claimed are therefore rendered here, while the ID is still bound, so
    those 500s carry the header and the `request_id` field too.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from hiss.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

UNEXPECTED_ERROR_MESSAGE = (
    "An unexpected error occurred. Please try again or contact support."
)


def unexpected_error_response(rid: str) -> JSONResponse:
    body = ErrorResponse(
        error="internal_server_error",
        message=UNEXPECTED_ERROR_MESSAGE,
        request_id=rid,
    )
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reuses a client-supplied X-Request-ID, otherwise generates an 8-character
    one, and exposes it via `request_id_var` and `request.state.request_id`.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as e:
            # The stack trace is logged, never returned
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid, request.method, request.url.path, str(e),
                exc_info=True,
            )
            response = unexpected_error_response(rid)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response

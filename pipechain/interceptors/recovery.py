"""Recovery interceptor - exception safety net.

Catches any exception raised by downstream interceptors or the terminal
handler and returns a structured JSON error so that the client always gets
a well-formed reply. Nothing else in the pipeline catches exceptions; place
this first in the chain to cover everything after it.
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from pipechain.chain import Handler, Interceptor

logger = logging.getLogger(__name__)


def recover_errors() -> Interceptor:
    """Return an interceptor that turns downstream exceptions into a 500."""

    def error_recovery(next_handler: Handler) -> Handler:
        async def _handler(request: Request) -> Response:
            try:
                return await next_handler(request)
            except Exception as exc:
                request.state.error = exc
                logger.error(
                    "Recovery caught exception in %s %s: %s",
                    request.method,
                    request.url.path,
                    exc,
                    exc_info=True,
                )
                # Sanitize the message to avoid leaking internal details
                # to untrusted clients.
                return JSONResponse(
                    {
                        "error": "internal_error",
                        "message": f"Internal error processing {request.method} {request.url.path}",
                    },
                    status_code=500,
                )

        return _handler

    return error_recovery

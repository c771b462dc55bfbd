"""Request logging interceptor.

Logs one line when the request enters the pipeline and one when the
response comes back out, with status and elapsed time.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from pipechain.chain import Handler, Interceptor

_default_logger = logging.getLogger("pipechain.access")


def log_requests(logger: Optional[logging.Logger] = None) -> Interceptor:
    """Return an interceptor that logs each request and its outcome."""
    log = logger if logger is not None else _default_logger

    def request_logger(next_handler: Handler) -> Handler:
        async def _handler(request: Request) -> Response:
            start = time.monotonic()
            log.info(
                "REQUEST  method=%s path=%s content_type=%s",
                request.method,
                request.url.path,
                request.headers.get("content-type"),
            )

            response = await next_handler(request)

            log.info(
                "RESPONSE method=%s path=%s status=%d elapsed_ms=%.1f",
                request.method,
                request.url.path,
                response.status_code,
                (time.monotonic() - start) * 1000.0,
            )
            return response

        return _handler

    return request_logger

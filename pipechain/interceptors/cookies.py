"""Server-time cookie stamping."""

from __future__ import annotations

import logging
import time
from typing import Callable

from starlette.requests import Request
from starlette.responses import Response

from pipechain.chain import Handler, Interceptor
from pipechain.constants import DEFAULT_TIME_COOKIE

logger = logging.getLogger(__name__)


def set_time_cookie(
    name: str = DEFAULT_TIME_COOKIE,
    clock: Callable[[], float] = time.time,
) -> Interceptor:
    """Return an interceptor that sets a UTC unix-time cookie on the response.

    The cookie is added after the downstream handler returns, so it lands
    on whatever response the rest of the pipeline produced.
    """

    def time_cookie(next_handler: Handler) -> Handler:
        async def _handler(request: Request) -> Response:
            response = await next_handler(request)
            stamp = str(int(clock()))
            response.set_cookie(name, stamp)
            logger.debug("Set cookie %s=%s on %s", name, stamp, request.url.path)
            return response

        return _handler

    return time_cookie

"""Content-type filter.

Short-circuits with ``415 Unsupported Media Type`` when the request body is
not declared with the expected media type. Downstream interceptors and the
terminal handler never run for rejected requests.
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from pipechain.chain import Handler, Interceptor
from pipechain.constants import DEFAULT_MEDIA_TYPE

logger = logging.getLogger(__name__)


def _media_type(header_value: str) -> str:
    """Strip parameters (``; charset=...``) and normalise case."""
    return header_value.split(";", 1)[0].strip().lower()


def filter_content_type(media_type: str = DEFAULT_MEDIA_TYPE) -> Interceptor:
    """Return an interceptor that only admits requests of *media_type*."""
    expected = _media_type(media_type)

    def content_type_filter(next_handler: Handler) -> Handler:
        async def _handler(request: Request) -> Response:
            received = _media_type(request.headers.get("content-type", ""))
            if received != expected:
                logger.info(
                    "Rejecting %s %s: content type %r, expected %r",
                    request.method,
                    request.url.path,
                    received or None,
                    expected,
                )
                return PlainTextResponse(
                    f"415 - Unsupported Media Type. Only {expected} is allowed",
                    status_code=415,
                )
            return await next_handler(request)

        return _handler

    return content_type_filter

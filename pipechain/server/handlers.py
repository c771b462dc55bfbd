"""Terminal handlers served behind the interceptor chain."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from pipechain.constants import SERVER_NAME, SERVER_VERSION

logger = logging.getLogger(__name__)


class City(BaseModel):
    """Request body accepted by :func:`handle_city`."""

    name: str = Field(min_length=1)
    area: int = Field(ge=0, description="Area in square miles.")


async def handle_city(request: Request) -> Response:
    """Decode a :class:`City` from the JSON body and acknowledge it."""
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.info("Malformed JSON body on %s: %s", request.url.path, exc)
        return PlainTextResponse("400 - Malformed JSON body", status_code=400)

    try:
        city = City.model_validate(payload)
    except ValidationError as exc:
        logger.info("Invalid city payload on %s: %d error(s)", request.url.path, exc.error_count())
        return JSONResponse(
            {"error": "invalid_body", "detail": exc.errors(include_url=False)},
            status_code=400,
        )

    logger.debug("Accepted city %r (area=%d)", city.name, city.area)
    return PlainTextResponse(f"Got {city.name} city with area of {city.area} sq miles!\n")


async def handle_health(request: Request) -> Response:
    """Liveness probe, served outside the interceptor chain."""
    return JSONResponse({"status": "ok", "name": SERVER_NAME, "version": SERVER_VERSION})

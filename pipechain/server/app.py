"""Starlette ASGI application factory.

The pipeline handler is composed once, at application construction, and
registered as a plain route endpoint.
"""

import logging
from typing import Dict, Optional

from starlette.applications import Starlette
from starlette.routing import Route

from pipechain.chain import Chain, Handler, no_content, not_found
from pipechain.config.schema import PipechainConfig
from pipechain.constants import HEALTH_PATH, SERVER_NAME
from pipechain.interceptors import (
    filter_content_type,
    log_requests,
    recover_errors,
    set_time_cookie,
)
from pipechain.server.handlers import handle_city, handle_health

logger = logging.getLogger(__name__)

FALLBACKS: Dict[str, Handler] = {
    "not_found": not_found,
    "no_content": no_content,
}


def build_chain(config: PipechainConfig) -> Chain:
    """Build the interceptor chain described by *config*.

    Order: ``[recovery,] logging, content-type filter, time cookie``.
    """
    pipeline = config.pipeline
    interceptors = [
        log_requests(),
        filter_content_type(pipeline.media_type),
        set_time_cookie(pipeline.cookie_name),
    ]
    if pipeline.recover_errors:
        interceptors.insert(0, recover_errors())
    return Chain(interceptors, fallback=FALLBACKS[pipeline.fallback])


def build_pipeline(config: PipechainConfig, terminal: Optional[Handler] = handle_city) -> Handler:
    """Compose the configured chain around *terminal*."""
    chain = build_chain(config)
    logger.info("Composing pipeline %r over %s", chain, getattr(terminal, "__name__", terminal))
    return chain.then(terminal)


def create_app(config: Optional[PipechainConfig] = None) -> Starlette:
    """Create and return the Starlette ASGI application."""
    if config is None:
        config = PipechainConfig()

    application = Starlette(
        routes=[
            Route(config.pipeline.path, endpoint=build_pipeline(config), methods=["POST"]),
            Route(HEALTH_PATH, endpoint=handle_health, methods=["GET"]),
        ],
    )
    application.state.config = config
    logger.info(
        "Starlette ASGI app '%s' created. Pipeline on POST %s, health on GET %s",
        SERVER_NAME,
        config.pipeline.path,
        HEALTH_PATH,
    )
    return application

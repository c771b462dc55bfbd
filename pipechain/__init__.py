"""
pipechain - order-preserving composition of request interceptors.

A :class:`~pipechain.chain.Chain` holds an ordered list of interceptors and
folds them around a terminal handler, so the first declared interceptor is
the outermost wrapper.
"""

from pipechain.chain import (
    Chain,
    Handler,
    Interceptor,
    Middleware,
    as_interceptor,
    create_chain,
    no_content,
    not_found,
)
from pipechain.constants import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION
__app_name__ = SERVER_NAME

__all__ = [
    "Chain",
    "Handler",
    "Interceptor",
    "Middleware",
    "SERVER_NAME",
    "SERVER_VERSION",
    "__app_name__",
    "__version__",
    "as_interceptor",
    "create_chain",
    "no_content",
    "not_found",
]

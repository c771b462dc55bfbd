"""Interceptors for the request pipeline.

Each public function here is a factory returning an
:data:`~pipechain.chain.Interceptor`: a callable that receives the next
handler and returns a new handler wrapping it.

Public API
----------
- :func:`filter_content_type` - Reject requests with the wrong media type
- :func:`set_time_cookie` - Stamp responses with the server time
- :func:`log_requests` - Request/response logging
- :func:`recover_errors` - Explicit exception safety net
"""

from pipechain.interceptors.content_type import filter_content_type
from pipechain.interceptors.cookies import set_time_cookie
from pipechain.interceptors.recovery import recover_errors
from pipechain.interceptors.request_log import log_requests

__all__ = [
    "filter_content_type",
    "log_requests",
    "recover_errors",
    "set_time_cookie",
]

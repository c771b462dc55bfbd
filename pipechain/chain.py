"""Core chain infrastructure.

Defines the handler/interceptor protocols, the default fallback handlers,
and :class:`Chain`, which folds an ordered list of interceptors around a
terminal handler.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, Protocol, Tuple

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

# ── Type protocols ───────────────────────────────────────────────────────


class Handler(Protocol):
    """Async callable that takes a request and returns a response."""

    async def __call__(self, request: Request) -> Response: ...


class Middleware(Protocol):
    """Async callable that receives the request and the next handler."""

    async def __call__(self, request: Request, next_handler: Handler) -> Response: ...


Interceptor = Callable[[Handler], Handler]


def as_interceptor(middleware: Middleware) -> Interceptor:
    """Lift a ``(request, next_handler)`` middleware into an interceptor."""

    def _apply(next_handler: Handler) -> Handler:
        async def _wrap(
            request: Request,
            _mw: Middleware = middleware,
            _next: Handler = next_handler,
        ) -> Response:
            return await _mw(request, _next)

        return _wrap

    return _apply


# ── Fallback handlers ────────────────────────────────────────────────────


async def not_found(request: Request) -> Response:
    """Default fallback: ``404 Not Found``."""
    return PlainTextResponse("Not Found", status_code=404)


async def no_content(request: Request) -> Response:
    """No-op fallback: an empty ``204 No Content``."""
    return Response(status_code=204)


# ── Chain ────────────────────────────────────────────────────────────────


class Chain:
    """Immutable, ordered sequence of interceptors.

    The first interceptor is the outermost wrapper: it runs first on the
    way in and last on the way out.

    Parameters
    ----------
    interceptors:
        Interceptors in execution order. The sequence is copied, so later
        changes to the caller's list do not affect the chain.
    fallback:
        Handler substituted by :meth:`then` when no terminal handler is
        given. Serving code should pass one explicitly (see
        :func:`pipechain.server.app.build_chain`); when omitted,
        :func:`not_found` is used as a convenience for library callers.
    """

    __slots__ = ("_interceptors", "_fallback")

    def __init__(
        self,
        interceptors: Iterable[Interceptor] = (),
        fallback: Optional[Handler] = None,
    ) -> None:
        self._interceptors: Tuple[Interceptor, ...] = tuple(interceptors)
        self._fallback: Handler = fallback if fallback is not None else not_found

    @property
    def interceptors(self) -> Tuple[Interceptor, ...]:
        return self._interceptors

    @property
    def fallback(self) -> Handler:
        return self._fallback

    def then(self, handler: Optional[Handler] = None) -> Handler:
        """Compose the interceptors around *handler*.

        For interceptors ``[i1, i2, ..., iN]`` the result behaves as
        ``i1(i2(...iN(handler)...))``. An empty chain returns *handler*
        itself. When *handler* is ``None`` the chain's fallback is used.

        Composition only calls the interceptors with their next handler;
        no handler is invoked until a request arrives.
        """
        if handler is None:
            logger.debug(
                "No terminal handler given; substituting fallback %s",
                getattr(self._fallback, "__name__", repr(self._fallback)),
            )
            handler = self._fallback

        current = handler
        for interceptor in reversed(self._interceptors):
            current = interceptor(current)
        return current

    def append(self, *interceptors: Interceptor) -> Chain:
        """Return a new chain with *interceptors* added after this one's."""
        return Chain(self._interceptors + interceptors, fallback=self._fallback)

    def extend(self, other: Chain) -> Chain:
        """Return a new chain running this chain's interceptors, then *other*'s."""
        return Chain(self._interceptors + other.interceptors, fallback=self._fallback)

    def __len__(self) -> int:
        return len(self._interceptors)

    def __iter__(self) -> Iterator[Interceptor]:
        return iter(self._interceptors)

    def __repr__(self) -> str:
        names = ", ".join(getattr(i, "__name__", repr(i)) for i in self._interceptors)
        return f"Chain([{names}])"


def create_chain(*interceptors: Interceptor, fallback: Optional[Handler] = None) -> Chain:
    """Build a :class:`Chain` from *interceptors* in execution order."""
    return Chain(interceptors, fallback=fallback)

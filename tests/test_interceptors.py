"""
Covers:
  - filter_content_type: accept/reject, parameters and case handling
  - set_time_cookie: cookie stamped after delegation
  - log_requests: request/response lines
  - recover_errors: explicit conversion of downstream failures
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from pipechain.chain import create_chain
from pipechain.interceptors import (
    filter_content_type,
    log_requests,
    recover_errors,
    set_time_cookie,
)


def _request(content_type: Optional[str] = None, path: str = "/city") -> Request:
    headers: List[Tuple[bytes, bytes]] = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode("latin-1")))
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "query_string": b"",
            "headers": headers,
        }
    )


def _ok_handler() -> AsyncMock:
    return AsyncMock(return_value=PlainTextResponse("ok"))


class TestFilterContentType:
    def test_matching_type_delegates(self):
        terminal = _ok_handler()
        handler = filter_content_type()(terminal)
        request = _request("application/json")

        response = asyncio.run(handler(request))

        assert response.status_code == 200
        terminal.assert_called_once_with(request)

    def test_missing_header_short_circuits(self):
        terminal = _ok_handler()
        handler = filter_content_type()(terminal)

        response = asyncio.run(handler(_request()))

        assert response.status_code == 415
        assert b"Unsupported Media Type" in response.body
        terminal.assert_not_called()

    def test_wrong_type_short_circuits(self):
        terminal = _ok_handler()
        response = asyncio.run(filter_content_type()(terminal)(_request("text/plain")))

        assert response.status_code == 415
        terminal.assert_not_called()

    def test_parameters_and_case_ignored(self):
        terminal = _ok_handler()
        handler = filter_content_type()(terminal)

        response = asyncio.run(handler(_request("Application/JSON; charset=utf-8")))

        assert response.status_code == 200
        terminal.assert_called_once()

    def test_custom_media_type(self):
        terminal = _ok_handler()
        handler = filter_content_type("application/xml")(terminal)

        assert asyncio.run(handler(_request("application/json"))).status_code == 415
        assert asyncio.run(handler(_request("application/xml"))).status_code == 200


class TestSetTimeCookie:
    def test_cookie_added_to_downstream_response(self):
        handler = set_time_cookie(clock=lambda: 1700000000.75)(_ok_handler())

        response = asyncio.run(handler(_request("application/json")))

        assert response.status_code == 200
        assert response.body == b"ok"
        assert response.headers["set-cookie"].startswith("server-time-utc=1700000000;")

    def test_custom_cookie_name(self):
        handler = set_time_cookie("stamp", clock=lambda: 5.0)(_ok_handler())

        response = asyncio.run(handler(_request()))

        assert response.headers["set-cookie"].startswith("stamp=5;")

    def test_cookie_set_after_delegation(self):
        seen_clock: List[str] = []

        async def terminal(request):
            seen_clock.append("terminal")
            return PlainTextResponse("ok")

        def clock() -> float:
            seen_clock.append("clock")
            return 1.0

        asyncio.run(set_time_cookie(clock=clock)(terminal)(_request()))

        assert seen_clock == ["terminal", "clock"]


class TestLogRequests:
    def test_logs_request_and_response(self, caplog):
        logger = logging.getLogger("test.pipechain.access")
        handler = log_requests(logger)(_ok_handler())

        with caplog.at_level(logging.INFO, logger="test.pipechain.access"):
            asyncio.run(handler(_request("application/json")))

        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 2
        assert messages[0].startswith("REQUEST  method=POST path=/city")
        assert "status=200" in messages[1]

    def test_error_propagates(self):
        terminal = AsyncMock(side_effect=ValueError("bad"))
        with pytest.raises(ValueError, match="bad"):
            asyncio.run(log_requests()(terminal)(_request()))


class TestRecoverErrors:
    def test_passes_through_on_success(self):
        terminal = _ok_handler()
        response = asyncio.run(recover_errors()(terminal)(_request()))
        assert response.status_code == 200

    def test_converts_exception_to_500(self):
        terminal = AsyncMock(side_effect=RuntimeError("secret path /etc/x"))
        request = _request()

        response = asyncio.run(recover_errors()(terminal)(request))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"] == "internal_error"
        assert "secret" not in body["message"]
        assert isinstance(request.state.error, RuntimeError)

    def test_covers_only_downstream(self):
        events: List[str] = []

        def outer(next_handler):
            async def _handler(request):
                events.append("outer")
                return await next_handler(request)

            return _handler

        terminal = AsyncMock(side_effect=RuntimeError("boom"))
        handler = create_chain(outer, recover_errors()).then(terminal)

        response = asyncio.run(handler(_request()))

        assert response.status_code == 500
        assert events == ["outer"]

import uuid
from unittest.mock import MagicMock

import pytest
from fastapi import Request, Response

from scalegate.common.core import request_context
from scalegate.gateway.middleware import call_id_middleware


def _mock_request(headers: dict) -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = headers
    request.method = "GET"
    request.url.path = "/function/echo"
    request.query_params = {}
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.state = MagicMock()
    return request


@pytest.mark.asyncio
async def test_middleware_generates_call_id():
    """A call id is generated, visible while handling and echoed on the response."""
    request = _mock_request({})

    async def call_next(req):
        req.state.captured_call_id = request_context.get_call_id()
        return Response(status_code=200)

    request_context.clear_call_id()
    response = await call_id_middleware(request, call_next)

    call_id = request.state.captured_call_id
    assert call_id is not None
    uuid.UUID(call_id)
    assert response.headers["X-Call-Id"] == call_id
    # Context is cleared once the request is done.
    assert request_context.get_call_id() is None


@pytest.mark.asyncio
async def test_middleware_keeps_incoming_call_id():
    request = _mock_request({"X-Call-Id": "abc-123"})

    async def call_next(req):
        req.state.captured_call_id = request_context.get_call_id()
        return Response(status_code=204)

    response = await call_id_middleware(request, call_next)

    assert request.state.captured_call_id == "abc-123"
    assert response.headers["X-Call-Id"] == "abc-123"


@pytest.mark.asyncio
async def test_middleware_replaces_blank_call_id():
    request = _mock_request({"X-Call-Id": "   "})

    async def call_next(req):
        return Response(status_code=200)

    response = await call_id_middleware(request, call_next)

    uuid.UUID(response.headers["X-Call-Id"])

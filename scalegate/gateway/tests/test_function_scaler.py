import json

import httpx
import pytest
import respx

from scalegate.common.core import request_context
from scalegate.gateway.core.exceptions import (
    FunctionNotFoundError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnreachableError,
)
from scalegate.gateway.services.function_scaler import ProviderFunctionScaler

PROVIDER = "http://provider:8080"
STATUS_URL = f"{PROVIDER}/system/function/myfn"
SCALE_URL = f"{PROVIDER}/system/scale-function/myfn"


@pytest.fixture
def scaler():
    return ProviderFunctionScaler(httpx.AsyncClient(), PROVIDER + "/", min_replicas=2, timeout=1.0)


@pytest.mark.asyncio
@respx.mock
async def test_ready_function_is_available(scaler):
    status_route = respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"replicas": 1, "availableReplicas": 1})
    )

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.available is True
    assert outcome.found is True
    assert outcome.error is None
    assert outcome.duration >= 0
    assert status_route.calls.last.request.url.params["namespace"] == "prod"
    assert [call.request.method for call in respx.calls] == ["GET"]


@pytest.mark.asyncio
@respx.mock
async def test_function_at_zero_requests_scale_up(scaler):
    respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"replicas": 0, "availableReplicas": 0})
    )
    scale_route = respx.post(SCALE_URL).mock(return_value=httpx.Response(202))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.available is False
    assert outcome.found is True
    assert outcome.error is None
    request = scale_route.calls.last.request
    assert request.url.params["namespace"] == "prod"
    assert json.loads(request.content) == {
        "serviceName": "myfn",
        "namespace": "prod",
        "replicas": 2,
    }


@pytest.mark.asyncio
@respx.mock
async def test_function_warming_up_is_not_rescaled(scaler):
    respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"replicas": 1, "availableReplicas": 0})
    )

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.available is False
    assert outcome.found is True
    assert [call.request.method for call in respx.calls] == ["GET"]


@pytest.mark.asyncio
@respx.mock
async def test_unknown_function_is_not_found(scaler):
    respx.get(STATUS_URL).mock(return_value=httpx.Response(404, text="not found"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is False
    assert outcome.available is False
    assert isinstance(outcome.error, FunctionNotFoundError)
    assert str(outcome.error) == "Function not found: myfn.prod"


@pytest.mark.asyncio
@respx.mock
async def test_failed_status_query_reports_not_found(scaler):
    respx.get(STATUS_URL).mock(return_value=httpx.Response(503, text="provider busy"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is False
    assert isinstance(outcome.error, ProviderError)
    assert outcome.error.status_code == 503
    assert outcome.error.detail == "provider busy"


@pytest.mark.asyncio
@respx.mock
async def test_unreachable_provider(scaler):
    respx.get(STATUS_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is False
    assert isinstance(outcome.error, ProviderUnreachableError)


@pytest.mark.asyncio
@respx.mock
async def test_provider_timeout(scaler):
    respx.get(STATUS_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is False
    assert isinstance(outcome.error, ProviderTimeoutError)


@pytest.mark.asyncio
@respx.mock
async def test_malformed_status_body(scaler):
    respx.get(STATUS_URL).mock(return_value=httpx.Response(200, content=b"<html>"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is False
    assert isinstance(outcome.error, ProviderError)


@pytest.mark.asyncio
@respx.mock
async def test_failed_scale_request_is_internal_error(scaler):
    respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"replicas": 0, "availableReplicas": 0})
    )
    respx.post(SCALE_URL).mock(return_value=httpx.Response(500, text="quota exceeded"))

    outcome = await scaler.scale("myfn", "prod")

    assert outcome.found is True
    assert outcome.available is False
    assert isinstance(outcome.error, ProviderError)
    assert "quota exceeded" in str(outcome.error)


@pytest.mark.asyncio
@respx.mock
async def test_call_id_is_propagated(scaler):
    route = respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"replicas": 1, "availableReplicas": 1})
    )
    request_context.set_call_id("call-123")
    try:
        await scaler.scale("myfn", "prod")
    finally:
        request_context.clear_call_id()

    assert route.calls.last.request.headers["X-Call-Id"] == "call-123"

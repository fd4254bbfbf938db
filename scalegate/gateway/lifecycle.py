"""
Where: scalegate/gateway/lifecycle.py
What: Gateway startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from scalegate.common.core.http_client import HttpClientFactory

from .config import GatewayConfig
from .core.proxy import FunctionProxy
from .middleware import make_scaling_handler
from .models.function import ScalingPolicy
from .services.function_scaler import ProviderFunctionScaler
from .services.scale_gate import ScaleGate

logger = logging.getLogger("gateway.main")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, gateway_config: GatewayConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    factory = HttpClientFactory(gateway_config)
    client = factory.create_async_client(timeout=gateway_config.UPSTREAM_TIMEOUT)

    try:
        scaler = ProviderFunctionScaler(
            client,
            gateway_config.FUNCTIONS_PROVIDER_URL,
            min_replicas=gateway_config.SCALE_MIN_REPLICAS,
            timeout=gateway_config.PROVIDER_QUERY_TIMEOUT,
        )
        policy = ScalingPolicy.from_config(gateway_config)
        scale_gate = ScaleGate(scaler, policy)

        proxy = FunctionProxy(
            client, gateway_config.FUNCTIONS_PROVIDER_URL, timeout=gateway_config.UPSTREAM_TIMEOUT
        )
        function_handler = proxy.forward

        if gateway_config.SCALE_FROM_ZERO:
            function_handler = make_scaling_handler(
                function_handler,
                scale_gate,
                timeout_status_code=gateway_config.SCALE_TIMEOUT_STATUS_CODE,
            )
            logger.info(
                "Scale from zero enabled (max_attempts=%s, retry_delay=%ss)",
                policy.max_attempts,
                policy.retry_delay,
            )
        else:
            logger.info("Scale from zero disabled; requests go straight to the provider.")

        app.state.config = gateway_config
        app.state.http_client = client
        app.state.scale_gate = scale_gate
        app.state.function_proxy = proxy
        app.state.function_handler = function_handler

        logger.info(
            "Gateway initialized with provider %s", gateway_config.FUNCTIONS_PROVIDER_URL
        )
        yield
    finally:
        logger.info("Gateway shutting down, closing http client.")
        await client.aclose()

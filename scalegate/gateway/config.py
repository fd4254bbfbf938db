"""
Gateway configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pydantic import Field
from scalegate.common.core.config import BaseAppConfig


class GatewayConfig(BaseAppConfig):
    """
    Configuration management for the scale-from-zero gateway.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8080", description="Listen address")

    # Provider integration
    FUNCTIONS_PROVIDER_URL: str = Field(
        default="http://faas-provider:8080",
        description="Base URL of the functions provider (scale API and function proxy)",
    )
    DEFAULT_NAMESPACE: str = Field(
        default="openfaas-fn", description="Namespace used for unqualified function names"
    )
    PROVIDER_QUERY_TIMEOUT: float = Field(
        default=5.0, gt=0, description="Timeout for one scale API call (seconds)"
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=60.0, gt=0, description="Timeout for proxied function calls (seconds)"
    )

    # Scale from zero
    SCALE_FROM_ZERO: bool = Field(
        default=True, description="Hold requests until the function has a ready replica"
    )
    SCALE_MAX_ATTEMPTS: int = Field(
        default=10, ge=1, description="Scaler calls per request before giving up"
    )
    SCALE_RETRY_DELAY_SECONDS: float = Field(
        default=5.0, ge=0, description="Fixed wait between scaler calls (seconds)"
    )
    SCALE_MIN_REPLICAS: int = Field(
        default=1, ge=1, description="Replicas requested when a function sits at zero"
    )
    # The gate writes nothing on timeout; this is what the transport sends instead.
    SCALE_TIMEOUT_STATUS_CODE: int = Field(
        default=200, ge=100, le=599, description="Status returned when scaling timed out"
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = GatewayConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise

"""
Dependency Injection for Gateway API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated, Awaitable, Callable

from fastapi import Depends, HTTPException, Request
from fastapi.responses import Response

from ..config import GatewayConfig, config
from ..core.function_name import get_route_raw_path, parse_function_path
from ..models.function import FunctionTarget

FunctionHandler = Callable[[Request, FunctionTarget], Awaitable[Response]]


# ==========================================
# 1. Service Accessors
# ==========================================


def get_gateway_config(request: Request) -> GatewayConfig:
    return getattr(request.app.state, "config", config)


def get_function_handler(request: Request) -> FunctionHandler:
    return request.app.state.function_handler


# Service Dependency Type Aliases
GatewayConfigDep = Annotated[GatewayConfig, Depends(get_gateway_config)]
FunctionHandlerDep = Annotated[FunctionHandler, Depends(get_function_handler)]


# ==========================================
# 2. Logic Dependencies (Resolution)
# ==========================================


async def resolve_function_target(
    request: Request, gateway_config: GatewayConfigDep
) -> FunctionTarget:
    """
    Resolve the addressed function from the route-relative raw path.

    Raises:
        HTTPException: 404 when the path names no function
    """
    target = parse_function_path(
        gateway_config.DEFAULT_NAMESPACE, get_route_raw_path(request.scope)
    )
    if target is None:
        raise HTTPException(status_code=404, detail="Not Found")

    return target


# Logic Dependency Type Aliases
FunctionTargetDep = Annotated[FunctionTarget, Depends(resolve_function_target)]

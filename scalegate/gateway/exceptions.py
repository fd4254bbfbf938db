"""
Where: scalegate/gateway/exceptions.py
What: Gateway exception handler registration and custom HTTP mappings.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("gateway.main")


async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    logger.error(
        str(exc),
        extra={
            "function_name": exc.function_name,
            "error_type": type(exc.cause).__name__,
            "error_detail": str(exc.cause),
        },
    )
    return JSONResponse(status_code=502, content={"message": "Bad Gateway"})


async def upstream_timeout_handler(request: Request, exc: UpstreamTimeoutError):
    logger.error(
        str(exc),
        extra={"function_name": exc.function_name, "error_type": type(exc.cause).__name__},
    )
    return JSONResponse(status_code=504, content={"message": "Gateway Timeout"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(UpstreamTimeoutError, upstream_timeout_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(UpstreamUnavailableError, upstream_unavailable_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete

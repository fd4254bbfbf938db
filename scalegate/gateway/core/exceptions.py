"""
Custom exception classes.

Represent errors raised while talking to the functions provider.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ScalingError(Exception):
    """Base exception class for provider and proxy failures."""

    pass


class FunctionNotFoundError(ScalingError):
    """Raised when the provider does not know the function."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"Function not found: {function_name}")


class ProviderError(ScalingError):
    """Non-success answer from the provider's system API."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Provider error ({status_code}): {detail}")


class ProviderTimeoutError(ProviderError):
    """Timeout while calling the provider's system API."""

    def __init__(self, detail: str = "Provider request timed out"):
        super().__init__(408, detail)


class ProviderUnreachableError(ScalingError):
    """Failed to connect to the provider."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Provider unreachable: {cause}")


class UpstreamUnavailableError(ScalingError):
    """Raised when a forwarded request cannot reach the function."""

    def __init__(self, function_name: str, cause: Exception):
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Can't reach service for: {function_name}: {cause}")


class UpstreamTimeoutError(UpstreamUnavailableError):
    """Raised when a forwarded request does not answer in time."""


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    error_detail = str(exc)
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": error_detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )

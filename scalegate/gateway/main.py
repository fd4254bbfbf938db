"""
Scale Gateway - scale-from-zero front for serverless functions

Holds each function invocation until the function has a ready replica,
then proxies it to the functions provider.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request

from .api.deps import FunctionHandlerDep, FunctionTargetDep
from .config import config
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import call_id_middleware

# Logger setup
setup_logging()
logger = logging.getLogger("gateway.main")

FUNCTION_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with manage_lifespan(app, config):
        yield


app = FastAPI(
    title="Scale Gateway", version="1.0.0", lifespan=lifespan, root_path=config.root_path
)

app.middleware("http")(call_id_middleware)
register_exception_handlers(app)


# ===========================================
# Endpoint definitions.
# ===========================================


@app.get("/healthz")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.api_route("/function/{function_path:path}", methods=FUNCTION_METHODS)
async def function_proxy(
    request: Request,
    target: FunctionTargetDep,
    handler: FunctionHandlerDep,
):
    """
    Invoke a function: `/function/<name>[.<namespace>]/<rest of path>`.

    With scale from zero enabled the request waits in the scale gate until
    the function has a ready replica.
    """
    logger.debug(f"Invocation for {target.identity} ({request.method} {target.path or '/'})")
    return await handler(request, target)


def run() -> None:
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port))


if __name__ == "__main__":
    run()

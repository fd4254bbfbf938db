"""
Where: scalegate/gateway/middleware.py
What: Gateway HTTP middleware: call id propagation, access logging and the
      scale-from-zero handler wrapped around the function proxy.
Why: Isolate cross-cutting request concerns from app assembly.
"""

import logging
import time

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from scalegate.common.core.request_context import (
    CALL_ID_HEADER,
    clear_call_id,
    generate_call_id,
    set_call_id,
)

from .api.deps import FunctionHandler
from .models.decision import GateVerdict
from .models.function import FunctionTarget
from .services.scale_gate import ScaleGate

logger = logging.getLogger("gateway.main")
scaling_logger = logging.getLogger("gateway.scaling")


async def call_id_middleware(request: Request, call_next):
    """Middleware for X-Call-Id propagation and structured access logging."""
    start_time = time.perf_counter()

    call_id = request.headers.get(CALL_ID_HEADER)
    if call_id:
        try:
            call_id = set_call_id(call_id)
        except ValueError as exc:
            logger.warning("Ignoring invalid %s header: %s", CALL_ID_HEADER, exc)
            call_id = generate_call_id()
    else:
        call_id = generate_call_id()

    try:
        response = await call_next(request)
        response.headers[CALL_ID_HEADER] = call_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "call_id": call_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "status": response.status_code,
                "latency_ms": process_time_ms,
                "user_agent": request.headers.get("user-agent"),
                "client_ip": request.client.host if request.client else None,
            },
        )

        return response
    finally:
        clear_call_id()


def make_scaling_handler(
    next_handler: FunctionHandler,
    gate: ScaleGate,
    timeout_status_code: int = 200,
) -> FunctionHandler:
    """
    Wrap `next_handler` so it only runs once the function has a ready replica.

    When the function is not ready after the gate's attempt budget,
    `next_handler` is not invoked and a status is returned to the client:
    404 when the function is unknown, 500 when scaling failed. A plain
    timeout writes nothing of its own; the client receives an empty body
    with `timeout_status_code`.
    """

    async def handler(request: Request, target: FunctionTarget) -> Response:
        identity = target.identity

        decision = await gate.admit(identity)

        if decision.verdict is GateVerdict.FORWARD:
            return await next_handler(request, target)

        if decision.verdict is GateVerdict.REJECTED:
            scaling_logger.error(
                f"Scaling: {decision.message}",
                extra={
                    "function_name": identity.name,
                    "namespace": identity.namespace,
                    "attempts": decision.attempts,
                    "status": decision.status_code,
                },
            )
            return PlainTextResponse(decision.message, status_code=decision.status_code)

        scaling_logger.warning(
            f"[Scale] function={identity} 0=>N timed-out after {decision.outcome.duration:f}s",
            extra={
                "function_name": identity.name,
                "namespace": identity.namespace,
                "attempts": decision.attempts,
            },
        )
        return Response(status_code=timeout_status_code)

    return handler

"""
Scale Gate

Holds a request until its function reports a ready replica, polling the
FunctionScaler with a fixed attempt budget and a fixed delay.

Only `available` ends the polling early. Whether the function was found
or the scaler failed is read from the last outcome once the budget is
spent, so an early not-found never short-circuits the loop.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from scalegate.gateway.models.decision import GateDecision
from scalegate.gateway.models.function import FunctionIdentity, ScaleOutcome, ScalingPolicy
from scalegate.gateway.services.function_scaler import FunctionScaler

logger = logging.getLogger("gateway.scale_gate")

NOT_FOUND_DETAIL = "function not found"


class ScaleGate:
    def __init__(
        self,
        scaler: FunctionScaler,
        policy: ScalingPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            scaler: FunctionScaler shared by all requests
            policy: attempt budget and retry delay, fixed for the gate's lifetime
            sleep: awaitable used between attempts
        """
        self.scaler = scaler
        self.policy = policy
        self._sleep = sleep

    async def admit(self, identity: FunctionIdentity) -> GateDecision:
        """Poll until available or out of attempts, then classify the last outcome."""
        outcome = await self._call_scaler(identity)
        attempts = 1

        for remaining in range(self.policy.max_attempts - 1, 0, -1):
            if outcome.available:
                break
            logger.info(
                f"Function {identity} unavailable after scale, {remaining} more attempt(s) left",
                extra={"function_name": identity.name, "namespace": identity.namespace},
            )
            await self._sleep(self.policy.retry_delay)
            outcome = await self._call_scaler(identity)
            attempts += 1

        return self.classify(identity, outcome, attempts)

    @staticmethod
    def classify(
        identity: FunctionIdentity, outcome: ScaleOutcome, attempts: int
    ) -> GateDecision:
        if outcome.available:
            return GateDecision.forward(identity, outcome, attempts)

        if not outcome.found:
            detail = str(outcome.error) if outcome.error is not None else NOT_FOUND_DETAIL
            return GateDecision.rejected(
                identity, outcome, attempts, 404, error_message(identity, detail)
            )

        if outcome.error is not None:
            return GateDecision.rejected(
                identity, outcome, attempts, 500, error_message(identity, str(outcome.error))
            )

        return GateDecision.timeout(identity, outcome, attempts)

    async def _call_scaler(self, identity: FunctionIdentity) -> ScaleOutcome:
        try:
            return await self.scaler.scale(identity.name, identity.namespace)
        except Exception as exc:
            logger.exception(f"Scaler raised for {identity}: {exc}")
            return ScaleOutcome(available=False, found=True, error=exc)


def error_message(identity: FunctionIdentity, detail: str) -> str:
    return f"error finding function {identity.name}.{identity.namespace}: {detail}"

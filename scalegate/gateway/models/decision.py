"""
Scale gate decision model.

Every request that passes through the gate ends in exactly one decision.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .function import FunctionIdentity, ScaleOutcome


class GateVerdict(str, Enum):
    FORWARD = "forward"
    REJECTED = "rejected"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of one pass through the scale gate.

    Only REJECTED decisions carry a status code and message. TIMEOUT leaves
    the response status to the HTTP layer.
    """

    verdict: GateVerdict
    identity: FunctionIdentity
    outcome: ScaleOutcome
    attempts: int
    status_code: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def forward(
        cls, identity: FunctionIdentity, outcome: ScaleOutcome, attempts: int
    ) -> "GateDecision":
        return cls(GateVerdict.FORWARD, identity, outcome, attempts)

    @classmethod
    def rejected(
        cls,
        identity: FunctionIdentity,
        outcome: ScaleOutcome,
        attempts: int,
        status_code: int,
        message: str,
    ) -> "GateDecision":
        return cls(GateVerdict.REJECTED, identity, outcome, attempts, status_code, message)

    @classmethod
    def timeout(
        cls, identity: FunctionIdentity, outcome: ScaleOutcome, attempts: int
    ) -> "GateDecision":
        return cls(GateVerdict.TIMEOUT, identity, outcome, attempts)

    @property
    def is_forward(self) -> bool:
        return self.verdict is GateVerdict.FORWARD

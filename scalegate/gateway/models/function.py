"""
Function domain models.

Identity of a function, the result of one scaling call, and the retry
policy applied while a request waits for a replica.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..config import GatewayConfig


@dataclass(frozen=True)
class FunctionIdentity:
    name: str
    namespace: str

    def __str__(self) -> str:
        return f"{self.name}.{self.namespace}"


@dataclass(frozen=True)
class FunctionTarget:
    """Addressed function and the path to forward below it (percent-escapes kept)."""

    identity: FunctionIdentity
    path: str = ""


@dataclass(frozen=True)
class ScaleOutcome:
    """
    Answer from a FunctionScaler for one call.

    Attributes:
        available: at least one replica is ready right now
        found: the provider knows the function
        error: failure while querying or scaling, if any
        duration: seconds spent on this call
    """

    available: bool
    found: bool
    error: Optional[Exception] = None
    duration: float = 0.0


class ScalingPolicy(BaseModel):
    """Attempt budget and fixed delay used by the scale gate."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=10, ge=1)
    retry_delay: float = Field(default=5.0, ge=0)

    @classmethod
    def from_config(cls, config: "GatewayConfig") -> "ScalingPolicy":
        return cls(
            max_attempts=config.SCALE_MAX_ATTEMPTS,
            retry_delay=config.SCALE_RETRY_DELAY_SECONDS,
        )

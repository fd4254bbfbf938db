"""
Data model definitions package.

Aggregates the gateway's domain models for use in other modules.
"""

from .decision import GateDecision, GateVerdict
from .function import FunctionIdentity, FunctionTarget, ScaleOutcome, ScalingPolicy

__all__ = [
    "FunctionIdentity",
    "FunctionTarget",
    "GateDecision",
    "GateVerdict",
    "ScaleOutcome",
    "ScalingPolicy",
]

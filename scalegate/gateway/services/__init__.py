"""
Services package.

Provides the scale gate and its provider integration.
"""

from .function_scaler import FunctionScaler, ProviderFunctionScaler
from .scale_gate import ScaleGate

__all__ = [
    "FunctionScaler",
    "ProviderFunctionScaler",
    "ScaleGate",
]

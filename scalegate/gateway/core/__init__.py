"""
Core logic package.

Provides shared logic such as function name resolution and proxying.
"""

from .function_name import (
    get_forward_path,
    get_route_raw_path,
    get_service_name,
    parse_function_path,
    resolve_function_identity,
)
from .proxy import FunctionProxy

__all__ = [
    "get_forward_path",
    "get_route_raw_path",
    "get_service_name",
    "parse_function_path",
    "resolve_function_identity",
    "FunctionProxy",
]

"""
Where: scalegate/gateway/core/function_name.py
What: Resolve the function addressed by an invocation path.
Why: The resolved name/namespace is the key for every scaling query.
"""

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote, unquote

from ..models.function import FunctionIdentity, FunctionTarget

NAMESPACE_SEPARATOR = "."

_FUNCTION_PATH_PATTERN = re.compile(r"^/?(?:async-)?function/(?P<name>[^/?]+)(?P<rest>[^?]*)")


def get_route_raw_path(scope: Mapping[str, Any]) -> str:
    """
    Request path as the client sent it, relative to the app's root path.

    Percent-escapes are kept, so `%3F` and `%2F` survive forwarding.
    Servers that omit `raw_path` fall back to the re-quoted decoded path.
    """
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = quote(scope.get("path", ""))

    root_path = quote(scope.get("root_path", "")).rstrip("/")
    if root_path and (path == root_path or path.startswith(root_path + "/")):
        path = path[len(root_path) :]
    return path


def get_service_name(url_path: str) -> str:
    """
    Extract the addressed function segment from a request path.

    `/function/xyz.prod/rest/of/path?q=a` yields `xyz.prod`. Paths outside
    the function routes yield an empty string.
    """
    match = _FUNCTION_PATH_PATTERN.match(url_path)
    if not match:
        return ""
    return unquote(match.group("name")).strip("/")


def get_forward_path(url_path: str) -> str:
    """Return the part of a function path that follows the function segment."""
    match = _FUNCTION_PATH_PATTERN.match(url_path)
    if not match:
        return ""
    return match.group("rest")


def resolve_function_identity(default_namespace: str, full_name: str) -> FunctionIdentity:
    """
    Split `name.namespace` at the last separator.

    Unqualified names get `default_namespace`. Nothing is validated here;
    an empty or odd name is passed through for the scaler to judge.
    """
    index = full_name.rfind(NAMESPACE_SEPARATOR)
    if index > -1:
        return FunctionIdentity(name=full_name[:index], namespace=full_name[index + 1 :])
    return FunctionIdentity(name=full_name, namespace=default_namespace)


def parse_function_path(default_namespace: str, url_path: str) -> Optional[FunctionTarget]:
    """Identity plus forward path for a function route, None when no function is named."""
    service_name = get_service_name(url_path)
    if not service_name:
        return None
    return FunctionTarget(
        identity=resolve_function_identity(default_namespace, service_name),
        path=get_forward_path(url_path),
    )

"""
Function proxy

Relays an admitted request to the function through the provider and
hands the upstream response back unchanged.
"""

import logging
from typing import Dict

import httpx
from fastapi import Request
from fastapi.responses import Response

from scalegate.common.core.request_context import CALL_ID_HEADER, get_call_id

from ..models.function import FunctionIdentity, FunctionTarget
from .exceptions import UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger("gateway.proxy")

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


def filter_headers(headers) -> Dict[str, str]:
    """Drop hop-by-hop headers, Host and Content-Length."""
    return {
        key: value
        for key, value in headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS
        and key.lower() not in ("host", "content-length")
    }


class FunctionProxy:
    def __init__(self, client: httpx.AsyncClient, provider_url: str, timeout: float = 60.0):
        self.client = client
        self.provider_url = provider_url.rstrip("/")
        self.timeout = timeout

    def build_url(self, identity: FunctionIdentity, path: str, query: str = "") -> str:
        url = f"{self.provider_url}/function/{identity.name}.{identity.namespace}{path}"
        return f"{url}?{query}" if query else url

    async def forward(self, request: Request, target: FunctionTarget) -> Response:
        """
        Relay `request` to the function named by `target`.

        `target.path` and the query string are passed on as received.
        """
        identity = target.identity
        query = request.scope.get("query_string", b"").decode("latin-1")
        url = self.build_url(identity, target.path, query)

        # Starlette hands header names over lower-cased; keep them that way.
        headers = filter_headers(request.headers)
        if request.client:
            forwarded_for = request.headers.get("x-forwarded-for")
            headers["x-forwarded-for"] = (
                f"{forwarded_for}, {request.client.host}" if forwarded_for else request.client.host
            )
        if request.headers.get("host"):
            headers["x-forwarded-host"] = request.headers["host"]
        call_id = get_call_id()
        if call_id:
            headers[CALL_ID_HEADER.lower()] = call_id

        body = await request.body()
        logger.debug(f"Proxying {request.method} {request.url.path} to {url}")

        try:
            upstream = await self.client.request(
                request.method,
                url,
                content=body,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(str(identity), exc) from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailableError(str(identity), exc) from exc

        response_headers = filter_headers(upstream.headers)
        # httpx already decoded the body.
        response_headers.pop("content-encoding", None)
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=response_headers,
        )

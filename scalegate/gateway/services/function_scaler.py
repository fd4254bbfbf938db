"""
Function Scaler

Asks the functions provider whether a function has a ready replica and,
when it sits at zero, requests a scale-up. One call answers once; waiting
for the replica to come up is the scale gate's job.
"""

import logging
import time
from typing import Any, Dict, Protocol

import httpx

from scalegate.common.core.request_context import CALL_ID_HEADER, get_call_id
from scalegate.gateway.core.exceptions import (
    FunctionNotFoundError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnreachableError,
)
from scalegate.gateway.models.function import ScaleOutcome

logger = logging.getLogger("gateway.function_scaler")


class FunctionScaler(Protocol):
    """Capability required by the scale gate. Must be safe for concurrent use."""

    async def scale(self, name: str, namespace: str) -> ScaleOutcome: ...


class ProviderFunctionScaler:
    """
    FunctionScaler backed by the provider's system API.

    - GET  /system/function/{name}?namespace=   -> replica status
    - POST /system/scale-function/{name}?namespace= -> replica request
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        provider_url: str,
        min_replicas: int = 1,
        timeout: float = 5.0,
    ):
        self.client = client
        self.provider_url = provider_url.rstrip("/")
        self.min_replicas = min_replicas
        self.timeout = timeout

    async def scale(self, name: str, namespace: str) -> ScaleOutcome:
        start = time.perf_counter()

        try:
            status = await self.get_replicas(name, namespace)
        except (ProviderError, ProviderUnreachableError, FunctionNotFoundError) as exc:
            # A function that cannot be queried is reported as not found.
            return ScaleOutcome(
                available=False, found=False, error=exc, duration=time.perf_counter() - start
            )

        available_replicas = int(status.get("availableReplicas") or 0)
        if available_replicas > 0:
            return ScaleOutcome(available=True, found=True, duration=time.perf_counter() - start)

        if int(status.get("replicas") or 0) == 0:
            logger.info(
                f"[Scale] function={name}.{namespace} 0 => {self.min_replicas} requested",
                extra={"function_name": name, "namespace": namespace},
            )
            try:
                await self.set_replicas(name, namespace, self.min_replicas)
            except (ProviderError, ProviderUnreachableError, FunctionNotFoundError) as exc:
                return ScaleOutcome(
                    available=False, found=True, error=exc, duration=time.perf_counter() - start
                )

        return ScaleOutcome(available=False, found=True, duration=time.perf_counter() - start)

    async def get_replicas(self, name: str, namespace: str) -> Dict[str, Any]:
        url = f"{self.provider_url}/system/function/{name}"
        response = await self._request("GET", url, name, namespace)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(response.status_code, f"Invalid status body: {exc}") from exc
        if not isinstance(data, dict):
            raise ProviderError(response.status_code, "Invalid status body: expected an object")
        return data

    async def set_replicas(self, name: str, namespace: str, replicas: int) -> None:
        url = f"{self.provider_url}/system/scale-function/{name}"
        payload = {"serviceName": name, "namespace": namespace, "replicas": replicas}
        await self._request("POST", url, name, namespace, json=payload)

    async def _request(
        self, method: str, url: str, name: str, namespace: str, **kwargs: Any
    ) -> httpx.Response:
        headers = {}
        call_id = get_call_id()
        if call_id:
            headers[CALL_ID_HEADER] = call_id

        try:
            response = await self.client.request(
                method,
                url,
                params={"namespace": namespace},
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(str(exc) or "Provider request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning(
                f"Provider call failed for function '{name}.{namespace}'",
                extra={
                    "function_name": name,
                    "namespace": namespace,
                    "target_url": url,
                    "error_type": type(exc).__name__,
                    "error_detail": str(exc),
                },
            )
            raise ProviderUnreachableError(exc) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 404:
                raise FunctionNotFoundError(f"{name}.{namespace}") from exc
            raise ProviderError(status_code, exc.response.text.strip()) from exc

        return response

import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = httpx.Limits(max_keepalive_connections=20, max_connections=100)


class HttpClientFactory:
    """
    Builds the shared httpx client used for provider and function traffic.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient; VERIFY_SSL applies unless `verify` is passed.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        verify = kwargs.pop("verify", None)
        if verify is None:
            verify = self.config.VERIFY_SSL
        if verify is False:
            logger.warning("TLS certificate verification is disabled for upstream calls")

        kwargs.setdefault("limits", DEFAULT_LIMITS)
        # Provider and function calls never go through host HTTP(S)_PROXY settings.
        kwargs.setdefault("trust_env", False)

        return httpx.AsyncClient(verify=verify, **kwargs)

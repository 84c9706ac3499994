"""API key usage lookup (OpenRouter)."""

import logging

import httpx

from hibiki.config.models import UsageConfig
from hibiki.domain.entities import KeyUsage
from hibiki.domain.exceptions import HibikiError

logger = logging.getLogger(__name__)


class UsageLookupError(HibikiError):
    """使用状況を取得できなかった場合の例外"""


class OpenRouterUsageClient:
    """Fetches key usage from the OpenRouter key endpoint."""

    def __init__(self, config: UsageConfig, timeout_seconds: float = 10.0) -> None:
        """Initialize the client.

        Args:
            config: Usage configuration (api_key, endpoint).
            timeout_seconds: HTTP timeout.
        """
        self._config = config
        self._timeout = timeout_seconds

    async def fetch(self) -> KeyUsage:
        """Fetch the current usage.

        Returns:
            KeyUsage

        Raises:
            UsageLookupError: On HTTP errors or unexpected payloads.
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self._config.endpoint,
                    headers={"Authorization": f"Bearer {self._config.api_key}"},
                    timeout=self._timeout,
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Usage lookup timed out")
            raise UsageLookupError("timeout") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Usage lookup HTTP error: %s", e)
            raise UsageLookupError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning("Usage lookup request error: %s", e)
            raise UsageLookupError(str(e)) from e

        try:
            data = response.json().get("data") or {}
            return KeyUsage(
                usage=float(data.get("usage") or 0),
                limit=float(data.get("limit") or 0),
                credits=float(data.get("limit_remaining") or data.get("credits") or 0),
            )
        except (ValueError, AttributeError, TypeError) as e:
            raise UsageLookupError(f"unexpected response: {e}") from e

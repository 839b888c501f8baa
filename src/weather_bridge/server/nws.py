"""Async helpers for the National Weather Service REST API using ``httpx``."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

NWS_API_BASE = "https://api.weather.gov"
USER_AGENT = "weather-app/1.0"

logger = logging.getLogger(__name__)


class NWSClient:
    """
    Thin GET-and-decode client for api.weather.gov.

    Every request opens its own ``httpx.AsyncClient``; nothing is shared
    between calls. Failures are logged and reported as ``None``.
    """

    def __init__(
        self,
        base_url: str = NWS_API_BASE,
        *,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "application/geo+json",
        }
        self._transport = transport

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def points_url(self, latitude: float, longitude: float) -> str:
        return self.url(f"points/{latitude:.4f},{longitude:.4f}")

    async def get_json(self, url: str) -> Optional[dict[str, Any]]:
        """GET ``url`` and return the decoded JSON object, or None on any failure."""
        try:
            async with httpx.AsyncClient(
                headers=self.headers, transport=self._transport, follow_redirects=True
            ) as client:
                r = await client.get(url)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as exc:
            logger.error("NWS request to %s failed: HTTP %s", url, exc.response.status_code)
            return None
        except httpx.HTTPError as exc:
            logger.error("NWS request to %s failed: %s", url, exc)
            return None
        except ValueError as exc:
            logger.error("NWS response from %s is not JSON: %s", url, exc)
            return None

        if not isinstance(data, dict):
            logger.error("NWS response from %s is not a JSON object", url)
            return None
        return data

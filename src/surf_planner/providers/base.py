"""Base marine forecast provider abstraction.

This module defines the interface for marine forecast providers and the
canonical format that all providers must translate their data into.

## Canonical Data Format

All providers translate their API responses into a list of
`surf_planner.models.forecast.ForecastHour`, sorted by ascending time.

### Canonical Units
- Wave, swell and tide heights: meters (m)
- Swell period: seconds (s)
- Wind speed: knots (kt)
- Directions: degrees (0-359, where 0=N, 90=E, 180=S, 270=W)
- Water temperature: Celsius (°C)
- Time: UTC, start of hour

## Supported Providers

### Stormglass (stormglass.io)
- Endpoints: /v2/weather/point, /v2/tide/sea-level/point
- Auth: API key in the Authorization header
- Rate limit: Daily quota per plan; 429 once exhausted
- Native units: SI (m, s, m/s, degrees, °C)
- Key response paths: hours[].<param>.<source>, data[].sg
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from surf_planner.models.forecast import ForecastHour
from surf_planner.models.location import Coordinates

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for forecast provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when the provider rejects our credentials."""


class ForecastProvider(ABC):
    """Abstract base class for marine forecast providers.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key
    """

    name: str
    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            base_url: Override the provider's default base URL
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        if self.requires_api_key and not api_key:
            raise ValueError(f"{self.name} requires an API key")
        self.api_key = api_key
        if base_url:
            self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent or "surf-planner/0.1.0"
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ForecastProvider:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API with retry logic.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response

        Raises:
            ProviderError: If request fails
            RateLimitError: If rate limit is exceeded
            AuthenticationError: If credentials are rejected
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        response = await client.get(url, params=params, headers=request_headers)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    def _parse_json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body.

        Raises:
            ProviderError: If the body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text[:200],
            ) from e
        if not isinstance(data, dict):
            raise ProviderError(
                "Unexpected response shape: expected a JSON object",
                provider=self.name,
                response_body=response.text[:200],
            )
        return data

    @abstractmethod
    async def get_forecast(
        self,
        coordinates: Coordinates,
        start_time: datetime,
        hours: int,
    ) -> list[ForecastHour]:
        """Get an hourly marine forecast for a location.

        Args:
            coordinates: Location coordinates
            start_time: First forecast hour (UTC)
            hours: Number of hours to cover

        Returns:
            Forecast hours in canonical format, ascending

        Raises:
            ProviderError: If forecast cannot be retrieved
        """

    def get_max_forecast_hours(self) -> int:
        """Get maximum forecast horizon supported, in hours."""
        return 168

"""Marine forecast providers."""

from surf_planner.providers.base import (
    AuthenticationError,
    ForecastProvider,
    ProviderError,
    RateLimitError,
)
from surf_planner.providers.stormglass import StormglassProvider, translate_hours

__all__ = [
    "AuthenticationError",
    "ForecastProvider",
    "ProviderError",
    "RateLimitError",
    "StormglassProvider",
    "translate_hours",
]

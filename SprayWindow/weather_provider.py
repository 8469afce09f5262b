"""Forecast provider abstraction - allows swapping different weather APIs."""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from spray_data import Forecast


class WeatherProviderError(Exception):
    """
    Exception raised when a weather provider fails.

    status_code carries the HTTP status when the API answered with an
    error; it is None for network and parse failures.
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_client_error(self) -> bool:
        """True for 4xx answers, which retrying will not fix."""
        return self.status_code is not None and 400 <= self.status_code < 500


class ForecastProviderBase(ABC):
    """Abstract base class for hourly forecast providers."""

    @abstractmethod
    def get_hourly(self, hours: int = 12) -> Forecast:
        """
        Fetch an hourly forecast starting at the current hour.

        Args:
            hours: Number of hours to return

        Returns:
            Forecast: Chronologically ordered observations (percent, km/h)

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class FallbackForecastProvider(ForecastProviderBase):
    """Tries each provider in order and returns the first successful forecast."""

    def __init__(self, providers: Sequence[ForecastProviderBase]):
        if not providers:
            raise ValueError("At least one provider is required")
        self.providers = list(providers)

    def get_hourly(self, hours: int = 12) -> Forecast:
        failures: List[WeatherProviderError] = []
        names: List[str] = []
        for provider in self.providers:
            name = type(provider).__name__
            try:
                return provider.get_hourly(hours)
            except WeatherProviderError as e:
                logging.warning(f"{name} failed, trying next provider: {e}")
                failures.append(e)
                names.append(name)

        summary = "; ".join(f"{name}: {e}" for name, e in zip(names, failures))
        # Only a chain where every provider refused the request is a client error
        status_code = None
        if all(e.is_client_error for e in failures):
            status_code = failures[0].status_code
        raise WeatherProviderError(f"All weather providers failed ({summary})", status_code=status_code)

"""Forecast service with caching and retries, feeding the spray engine."""
import logging
import time
from typing import Optional
from weather_provider import ForecastProviderBase, WeatherProviderError
from spray_data import Forecast, SprayRecommendation
from spray_engine import compute_spray_state


class ForecastService:
    """
    Service that wraps a forecast provider with caching and retries.

    A forecast is reused until it is cache_ttl_seconds old (default: 10
    minutes). When every attempt fails the last good forecast is served,
    with a warning once it is older than stale_after_seconds.
    """

    def __init__(
        self,
        provider: ForecastProviderBase,
        horizon_hours: int = 12,
        cache_ttl_seconds: int = 600,
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0,
        stale_after_seconds: int = 3600
    ):
        """
        Initialize forecast service.

        Args:
            provider: Forecast provider to use
            horizon_hours: Number of hourly observations to request
            cache_ttl_seconds: How long to reuse a forecast before fetching again
            max_retries: Maximum number of fetch attempts per refresh
            retry_delay_seconds: Base delay between attempts (grows linearly)
            stale_after_seconds: Age past which a fallback forecast is reported as stale
        """
        self.provider = provider
        self.horizon_hours = horizon_hours
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self.stale_after_seconds = stale_after_seconds

        self._forecast: Optional[Forecast] = None
        self._stored_at: float = 0.0

    def _fresh_cache(self, now: float) -> Optional[Forecast]:
        if self._forecast is None:
            return None
        age = now - self._stored_at
        if age < self.cache_ttl_seconds:
            logging.debug(f"Using cached forecast (age: {age:.1f}s, TTL: {self.cache_ttl_seconds}s)")
            return self._forecast
        logging.info(f"Cached forecast expired (age: {age:.1f}s), refreshing")
        return None

    def _fetch_with_retries(self) -> Forecast:
        """
        Ask the provider for a forecast, retrying transient failures.

        Client errors (HTTP 4xx) end the attempts at once. The raised error
        reports how many attempts were actually made.
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                return self.provider.get_hourly(self.horizon_hours)
            except WeatherProviderError as e:
                logging.warning(f"Forecast fetch attempt {attempts}/{self.max_retries} failed: {e}")
                if e.is_client_error:
                    logging.error(f"Provider rejected the request (HTTP {e.status_code}), not retrying")
                elif attempts < self.max_retries:
                    delay = self.retry_delay_seconds * attempts
                    logging.info(f"Retrying in {delay}s...")
                    time.sleep(delay)
                    continue
                raise WeatherProviderError(
                    f"Failed to fetch forecast after {attempts} attempts: {e}",
                    status_code=e.status_code,
                ) from e

    def get_forecast(self) -> Forecast:
        """
        Get the latest forecast, using cache if still fresh.

        Returns:
            Forecast: Latest hourly forecast (may be cached or stale)

        Raises:
            WeatherProviderError: If fetching fails and nothing was cached
        """
        now = time.time()
        cached = self._fresh_cache(now)
        if cached is not None:
            return cached

        try:
            forecast = self._fetch_with_retries()
        except WeatherProviderError as e:
            if self._forecast is None:
                logging.error(f"{e}; no cached forecast available")
                raise
            logging.warning(f"{e}; serving last good forecast")
            if self._forecast.is_stale(self.stale_after_seconds):
                logging.warning(
                    f"Last good forecast is older than {self.stale_after_seconds}s, spray advice may be outdated"
                )
            return self._forecast

        logging.info(f"Forecast fetch successful: {len(forecast.hours)} hours")
        self._forecast = forecast
        self._stored_at = now
        return forecast

    def get_recommendation(self) -> SprayRecommendation:
        """Fetch (or reuse) the forecast and classify it."""
        return compute_spray_state(self.get_forecast().hours)

"""Tests for the provider abstraction and fallback chain."""
import pytest
from weather_provider import ForecastProviderBase, FallbackForecastProvider, WeatherProviderError
from spray_data import Forecast, HourlyObservation


class StaticProvider(ForecastProviderBase):
    def __init__(self, forecast=None, error=None):
        self.forecast = forecast
        self.error = error
        self.calls = 0

    def get_hourly(self, hours=12):
        self.calls += 1
        if self.error:
            raise self.error
        return self.forecast


@pytest.fixture
def forecast():
    return Forecast(hours=[HourlyObservation(time="T0", rain_prob=0, wind_speed=0)], fetched_at=0)


def test_base_provider_is_abstract():
    with pytest.raises(TypeError):
        ForecastProviderBase()


def test_fallback_uses_first_success(forecast):
    primary = StaticProvider(forecast=forecast)
    secondary = StaticProvider(forecast=None)

    result = FallbackForecastProvider([primary, secondary]).get_hourly()

    assert result is forecast
    assert secondary.calls == 0


def test_fallback_moves_to_next_provider(forecast):
    primary = StaticProvider(error=WeatherProviderError("Network error: down"))
    secondary = StaticProvider(forecast=forecast)

    result = FallbackForecastProvider([primary, secondary]).get_hourly(6)

    assert result is forecast
    assert primary.calls == 1
    assert secondary.calls == 1


def test_fallback_raises_when_all_fail():
    chain = FallbackForecastProvider([
        StaticProvider(error=WeatherProviderError("first down")),
        StaticProvider(error=WeatherProviderError("second down")),
    ])

    with pytest.raises(WeatherProviderError) as exc_info:
        chain.get_hourly()

    assert "first down" in str(exc_info.value)
    assert "second down" in str(exc_info.value)


def test_fallback_requires_providers():
    with pytest.raises(ValueError):
        FallbackForecastProvider([])


def test_provider_error_client_status():
    assert WeatherProviderError("bad key", status_code=401).is_client_error is True
    assert WeatherProviderError("server down", status_code=503).is_client_error is False
    assert WeatherProviderError("Network error: 404 in url").is_client_error is False


def test_fallback_mixed_failures_are_retryable():
    chain = FallbackForecastProvider([
        StaticProvider(error=WeatherProviderError("Network error: timed out")),
        StaticProvider(error=WeatherProviderError("OpenWeather API error 401: bad key", status_code=401)),
    ])

    with pytest.raises(WeatherProviderError) as exc_info:
        chain.get_hourly()

    assert exc_info.value.status_code is None
    assert exc_info.value.is_client_error is False


def test_fallback_all_rejected_is_client_error():
    chain = FallbackForecastProvider([
        StaticProvider(error=WeatherProviderError("MeteoSource API error 403: bad key", status_code=403)),
        StaticProvider(error=WeatherProviderError("OpenWeather API error 401: bad key", status_code=401)),
    ])

    with pytest.raises(WeatherProviderError) as exc_info:
        chain.get_hourly()

    assert exc_info.value.status_code == 403
    assert exc_info.value.is_client_error is True

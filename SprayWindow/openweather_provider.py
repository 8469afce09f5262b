"""OpenWeather One Call API hourly forecast provider implementation."""
import logging
import time
import requests
from datetime import datetime, timezone
from weather_provider import ForecastProviderBase, WeatherProviderError
from spray_data import Forecast, HourlyObservation

MS_TO_KMH = 3.6


class OpenWeatherProvider(ForecastProviderBase):
    """
    Forecast provider using the OpenWeather One Call API.

    Uses the hourly block: https://openweathermap.org/api/one-call-3
    Probability of precipitation ("pop", 0-1) becomes a percentage and
    wind speed (m/s in metric units) becomes km/h.
    """

    BASE_URL = "https://api.openweathermap.org/data/3.0/onecall"

    def __init__(
        self,
        api_key: str,
        lat: float,
        lon: float,
        units: str = "metric",
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            lat: Latitude (-90 to 90)
            lon: Longitude (-180 to 180)
            units: Units passed to the API; wind is converted assuming m/s
            lang: Language code for descriptions (e.g., "en", "th")
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.lat = lat
        self.lon = lon
        self.units = units
        self.lang = lang
        self.timeout = timeout

    def get_hourly(self, hours: int = 12) -> Forecast:
        """
        Fetch the hourly forecast from the One Call API.

        Returns:
            Forecast: Up to `hours` observations

        Raises:
            WeatherProviderError: If the API request fails
        """
        params = {
            "lat": self.lat,
            "lon": self.lon,
            "appid": self.api_key,
            "units": self.units,
            "lang": self.lang,
            "exclude": "current,minutely,daily,alerts",
        }

        try:
            logging.info(f"Making OpenWeather API request: {self.BASE_URL}")
            logging.debug(f"Request parameters: lat={self.lat}, lon={self.lon}, units={self.units}, lang={self.lang}")

            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response data keys: {list(data.keys())}")

            hourly = data.get("hourly")
            if not hourly:
                logging.error("Response missing 'hourly' array")
                raise WeatherProviderError("Response missing 'hourly' array")

            observations = [self._parse_hour(h) for h in hourly[:hours]]

            forecast = Forecast(
                hours=observations,
                fetched_at=int(time.time()),
                place_text=data.get("timezone", ""),
            )
            logging.info(f"Successfully parsed {len(observations)} hourly observations")
            return forecast

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _parse_hour(self, hour: dict) -> HourlyObservation:
        timestamp = datetime.fromtimestamp(hour["dt"], tz=timezone.utc)
        return HourlyObservation(
            time=timestamp.isoformat(),
            rain_prob=round((hour.get("pop") or 0) * 100),
            wind_speed=round((hour.get("wind_speed") or 0) * MS_TO_KMH),
            temp=hour.get("temp"),
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise a WeatherProviderError carrying the HTTP status of a failed call."""
        status = response.status_code
        try:
            error_data = response.json()
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {status}, body: {response.text[:500]}")
            raise WeatherProviderError(f"HTTP {status}: {response.text[:200]}", status_code=status)

        logging.error(f"OpenWeather API error response: {error_data}")
        # "cod" is sometimes a string in OpenWeather error bodies
        cod = error_data.get("cod", status)
        detail = error_data.get("message", "Unknown error")
        extra = error_data.get("parameters") or []
        suffix = f" (parameters: {', '.join(extra)})" if extra else ""
        raise WeatherProviderError(f"OpenWeather API error {cod}: {detail}{suffix}", status_code=status)

"""MeteoSource free point API hourly forecast provider implementation."""
import logging
import time
import requests
from weather_provider import ForecastProviderBase, WeatherProviderError
from spray_data import Forecast, HourlyObservation

MS_TO_KMH = 3.6
# The free tier has precipitation totals only, no probability
WET_HOUR_RAIN_PCT = 50
DRY_HOUR_RAIN_PCT = 10


class MeteoSourceProvider(ForecastProviderBase):
    """
    Forecast provider using the MeteoSource free point endpoint.

    https://www.meteosource.com/documentation
    """

    BASE_URL = "https://www.meteosource.com/api/v1/free/point"

    def __init__(
        self,
        api_key: str,
        lat: float,
        lon: float,
        lang: str = "en",
        timeout: int = 10
    ):
        self.api_key = api_key
        self.lat = lat
        self.lon = lon
        self.lang = lang
        self.timeout = timeout

    def get_hourly(self, hours: int = 12) -> Forecast:
        """
        Fetch the hourly forecast from MeteoSource.

        Raises:
            WeatherProviderError: If the API request fails
        """
        params = {
            "lat": self.lat,
            "lon": self.lon,
            "key": self.api_key,
            "sections": "hourly",
            "units": "metric",
            "language": self.lang,
        }

        try:
            logging.info(f"Making MeteoSource API request: {self.BASE_URL}")
            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            hourly = (data.get("hourly") or {}).get("data")
            if not hourly:
                logging.error("Response missing 'hourly.data' array")
                raise WeatherProviderError("Response missing 'hourly.data' array")

            observations = [self._parse_hour(h) for h in hourly[:hours]]
            logging.info(f"Successfully parsed {len(observations)} hourly observations")
            return Forecast(
                hours=observations,
                fetched_at=int(time.time()),
                place_text=data.get("timezone", ""),
            )

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _parse_hour(self, hour: dict) -> HourlyObservation:
        precipitation = hour.get("precipitation") or {}
        wind = hour.get("wind") or {}
        wet = (precipitation.get("total") or 0) > 0
        return HourlyObservation(
            time=hour.get("date", hour.get("time")),
            rain_prob=WET_HOUR_RAIN_PCT if wet else DRY_HOUR_RAIN_PCT,
            wind_speed=round((wind.get("speed") or 0) * MS_TO_KMH),
            temp=hour.get("temperature"),
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise a WeatherProviderError built from a MeteoSource error body."""
        try:
            error_data = response.json()
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(f"HTTP {response.status_code}: {response.text[:200]}", status_code=response.status_code)

        detail = error_data.get("detail", "Unknown error")
        if isinstance(detail, list):
            detail = "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
        logging.error(f"MeteoSource API error response: {error_data}")
        raise WeatherProviderError(
            f"MeteoSource API error {response.status_code}: {detail}", status_code=response.status_code
        )

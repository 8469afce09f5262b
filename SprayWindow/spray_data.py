"""Spray window domain model - pure data structures independent of any API."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union
from datetime import datetime, timezone

STATE_GOOD = "good"
STATE_CAUTION = "caution"
STATE_DONT = "dont"

REASON_GOOD = "good"
REASON_CAUTION = "caution"
REASON_RAIN = "rain"
REASON_WIND = "wind"


@dataclass
class HourlyObservation:
    """One hour of forecast, as consumed by the spray engine."""
    time: Any  # ISO-8601 string or any label; passed through untouched
    rain_prob: Optional[float] = None  # percent, 0-100
    wind_speed: Optional[float] = None  # km/h
    temp: Optional[float] = None  # Celsius, informational only

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HourlyObservation":
        """
        Build an observation from a plain mapping.

        Accepts both snake_case and camelCase keys (rain_prob/rainProb,
        wind_speed/windSpeed). Missing keys are left as None.
        """
        rain = data.get("rain_prob", data.get("rainProb"))
        wind = data.get("wind_speed", data.get("windSpeed"))
        return cls(
            time=data.get("time"),
            rain_prob=rain,
            wind_speed=wind,
            temp=data.get("temp"),
        )


def parse_time(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp ("Z" allowed); None if it is not one."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def coerce(value: Union[HourlyObservation, Mapping[str, Any]]) -> HourlyObservation:
    """Return value as an HourlyObservation, converting mappings."""
    if isinstance(value, HourlyObservation):
        return value
    return HourlyObservation.from_dict(value)


@dataclass(frozen=True)
class SprayRecommendation:
    """Result of classifying a forecast horizon."""
    state: str
    reason: str
    max_rain: float
    max_wind: float
    next_good_start: Any = None
    next_good_end: Any = None

    @property
    def has_window(self) -> bool:
        return self.next_good_start is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "reason": self.reason,
            "maxRain": self.max_rain,
            "maxWind": self.max_wind,
            "nextGoodStart": self.next_good_start,
            "nextGoodEnd": self.next_good_end,
        }


@dataclass
class Forecast:
    """An hourly forecast horizon as returned by a provider."""
    hours: List[HourlyObservation] = field(default_factory=list)
    fetched_at: int = 0  # UNIX timestamp (UTC)
    place_text: str = ""

    def is_stale(self, max_age_seconds: int = 900) -> bool:
        """Check if this forecast is older than max_age_seconds."""
        current_time = int(datetime.now(timezone.utc).timestamp())
        age = current_time - self.fetched_at
        return age > max_age_seconds

"""Result of one location refresh."""

from dataclasses import dataclass

from tidewatch.models.forecast import WaveReport, WeatherReport
from tidewatch.models.tide import TideBundle


@dataclass
class RefreshResult:
    latitude: float
    longitude: float
    weather: WeatherReport | None = None
    waves: WaveReport | None = None
    tides: TideBundle | None = None
    tides_stale: bool = False  # tides are the last good data, not from this refresh
    tide_error: str | None = None
    weather_error: str | None = None

    @property
    def attribution(self) -> str | None:
        return self.tides.attribution if self.tides else None

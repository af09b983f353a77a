"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass


@dataclass
class WeatherResult:
    """Domain model for current conditions at one place, independent of any specific API."""
    name: str
    country: str  # ISO country code, e.g. "GB"
    condition_main: str  # e.g., "Clouds", "Rain", "Clear"
    temp: float
    temp_min: float
    temp_max: float
    humidity: float  # percent
    wind_speed: float  # m/s
    utc_offset: int  # Offset from UTC in seconds

    @property
    def place(self) -> str:
        """Place name with country code, as shown in the panel header."""
        return f"{self.name}, {self.country}"

"""Weather service mapping provider outcomes to what the panel shows."""
import logging
from dataclasses import dataclass
from typing import Optional
from location import LocationQuery
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import WeatherResult

CITY_NOT_FOUND = "City not found"
WEATHER_UNAVAILABLE = "Unable to get weather data"

# One fixed message per lookup path.
FAILURE_MESSAGES = {
    "city": CITY_NOT_FOUND,
    "coordinates": WEATHER_UNAVAILABLE,
}


@dataclass(frozen=True)
class LookupOutcome:
    """Either a weather result or a user-facing error message, never both."""
    weather: Optional[WeatherResult] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.weather is not None


class WeatherService:
    """
    Service that runs a single lookup against a weather provider.

    Every request goes straight to the provider: no caching and no retries.
    A failed lookup is reported as a fixed message for the path that was taken.
    """

    def __init__(self, provider: WeatherProviderBase):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
        """
        self.provider = provider

    def lookup(self, query: LocationQuery) -> LookupOutcome:
        """
        Look up current weather for a query.

        Args:
            query: City or coordinates to look up

        Returns:
            LookupOutcome: The result on success, otherwise the error message
        """
        logging.info(f"Looking up weather ({query.kind}): {query}")
        try:
            weather = self.provider.get_current(query)
        except WeatherProviderError as e:
            message = FAILURE_MESSAGES[query.kind]
            logging.warning(f"Weather lookup failed (status={e.status_code}): {e}")
            return LookupOutcome(error=message)

        logging.info(f"Weather lookup successful: {weather.place}, {weather.temp}°C, {weather.condition_main}")
        return LookupOutcome(weather=weather)

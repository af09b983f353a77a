"""Weather provider abstraction - keeps the HTTP details out of the panel."""
from abc import ABC, abstractmethod
from typing import Optional

from location import LocationQuery
from weather_data import WeatherResult


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, query: LocationQuery) -> WeatherResult:
        """
        Fetch current weather data for a location.

        Args:
            query: City or coordinates to look up

        Returns:
            WeatherResult: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

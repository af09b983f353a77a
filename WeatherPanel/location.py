"""Location queries and resolution of the device position into a query."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Tuple, Union

GEOLOCATION_UNSUPPORTED = "Geolocation is not supported by this device."
LOCATION_UNAVAILABLE = "Unable to retrieve location"


@dataclass(frozen=True)
class CityQuery:
    """Free-text city lookup, e.g. "London" or "Paris,FR"."""
    text: str

    kind = "city"

    def to_params(self) -> Dict[str, str]:
        return {"q": self.text}


@dataclass(frozen=True)
class CoordinatesQuery:
    """Latitude/longitude lookup."""
    lat: float
    lon: float

    kind = "coordinates"

    def to_params(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


LocationQuery = Union[CityQuery, CoordinatesQuery]


class LocationError(Exception):
    """Raised when the device position cannot be turned into a query."""

    user_message = LOCATION_UNAVAILABLE


class GeolocationUnsupportedError(LocationError):
    """The platform has no position source at all."""

    user_message = GEOLOCATION_UNSUPPORTED


class PositionUnavailableError(LocationError):
    """A position source exists but refused or failed to answer."""


class PositionProviderBase(ABC):
    """Abstract single-shot source of the device position."""

    @abstractmethod
    def get_current_position(self) -> Tuple[float, float]:
        """
        Get the current device position.

        Returns:
            Tuple of (latitude, longitude)

        Raises:
            GeolocationUnsupportedError: If no position source exists
            PositionUnavailableError: If the position was denied or is unknown
        """
        pass


class StaticPositionProvider(PositionProviderBase):
    """Position provider backed by fixed, configured coordinates."""

    def __init__(self, lat: float, lon: float):
        """
        Initialize static position provider.

        Args:
            lat: Latitude (-90 to 90)
            lon: Longitude (-180 to 180)
        """
        self.lat = lat
        self.lon = lon

    def get_current_position(self) -> Tuple[float, float]:
        if not (-90.0 <= self.lat <= 90.0 and -180.0 <= self.lon <= 180.0):
            raise PositionUnavailableError(f"Coordinates out of range: {self.lat}, {self.lon}")
        return self.lat, self.lon


class UnsupportedPositionProvider(PositionProviderBase):
    """Position provider for hosts without any configured position."""

    def get_current_position(self) -> Tuple[float, float]:
        raise GeolocationUnsupportedError("No device position configured")


class LocationResolver:
    """Turns the device position or user text into a LocationQuery."""

    def __init__(self, position_provider: PositionProviderBase):
        self.position_provider = position_provider

    def resolve_initial(self) -> CoordinatesQuery:
        """
        Ask the position provider once for the device position.

        Returns:
            CoordinatesQuery for the device position

        Raises:
            LocationError: With a user-facing ``user_message`` if the position is unavailable
        """
        try:
            lat, lon = self.position_provider.get_current_position()
        except LocationError as e:
            logging.warning(f"Device position unavailable: {e}")
            raise
        logging.info(f"Device position resolved: lat={lat}, lon={lon}")
        return CoordinatesQuery(lat=lat, lon=lon)

    @staticmethod
    def city_query(text: str) -> CityQuery:
        # Submitted as typed, empty text included.
        return CityQuery(text=text)

"""OpenWeather Current Weather API provider implementation."""
import logging
import requests
from typing import Callable, Optional
from location import LocationQuery
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import WeatherResult

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/"


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API.

    Uses the free Current Weather API: https://openweathermap.org/current
    Looks up either a city name (``q=``) or a coordinate pair (``lat=``/``lon=``),
    always in metric units.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        units: str = "metric",
        timeout: int = 10,
        http_get: Optional[Callable[..., requests.Response]] = None,
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: API base URL, ending in a slash
            units: Temperature units sent with every request
            timeout: HTTP request timeout in seconds
            http_get: Callable with the ``requests.get`` signature (defaults to requests.get)
        """
        self.api_key = api_key
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.units = units
        self.timeout = timeout
        self._http_get = http_get

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}weather"

    def build_params(self, query: LocationQuery) -> dict:
        """Query-string parameters for one of the two request shapes."""
        params = dict(query.to_params())
        params["units"] = self.units
        params["APPID"] = self.api_key
        return params

    def get_current(self, query: LocationQuery) -> WeatherResult:
        """
        Fetch current weather from OpenWeather Current Weather API.

        Args:
            query: City or coordinates to look up

        Returns:
            WeatherResult: Current weather information

        Raises:
            WeatherProviderError: If the API request fails or the body is malformed
        """
        params = self.build_params(query)
        http_get = self._http_get or requests.get

        try:
            logging.info(f"Making OpenWeather API request: {self.endpoint} ({query.kind})")
            logging.debug(f"Request parameters: {query.to_params()}, units={self.units}")

            response = http_get(self.endpoint, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            return self._parse(data)

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {e}") from e
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {e}") from e

    def _parse(self, data: dict) -> WeatherResult:
        weather_array = data.get("weather") or []
        if not weather_array:
            raise WeatherProviderError("Response missing 'weather' array")
        weather = weather_array[0]

        main_data = data.get("main")
        if not main_data:
            raise WeatherProviderError("Response missing 'main' block")

        sys_data = data.get("sys")
        if not sys_data:
            raise WeatherProviderError("Response missing 'sys' block")

        wind_data = data.get("wind")
        if not wind_data:
            raise WeatherProviderError("Response missing 'wind' block")

        result = WeatherResult(
            name=str(data["name"]),
            country=str(sys_data["country"]),
            condition_main=str(weather["main"]),
            temp=float(main_data["temp"]),
            temp_min=float(main_data["temp_min"]),
            temp_max=float(main_data["temp_max"]),
            humidity=float(main_data["humidity"]),
            wind_speed=float(wind_data["speed"]),
            utc_offset=int(data["timezone"]),  # Current API uses "timezone", in seconds
        )
        logging.info(f"Successfully parsed weather data: {result.place}, {result.temp}°C, {result.condition_main}")
        return result

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        logging.error(f"OpenWeather API error response: {error_data}")
        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
        raise WeatherProviderError(
            f"OpenWeather API error {cod}: {message}",
            status_code=response.status_code,
        )

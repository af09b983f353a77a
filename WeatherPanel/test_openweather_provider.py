"""Tests for OpenWeather provider."""
import pytest
import requests
from unittest.mock import Mock, patch
from location import CityQuery, CoordinatesQuery
from openweather_provider import OpenWeatherProvider, WeatherProviderError
from weather_data import WeatherResult


@pytest.fixture
def sample_openweather_response():
    """Sample OpenWeather API response."""
    return {
        "coord": {"lon": -0.12, "lat": 51.5},
        "weather": [
            {
                "id": 803,
                "main": "Clouds",
                "description": "broken clouds",
                "icon": "04d"
            }
        ],
        "base": "stations",
        "main": {
            "temp": 14.6,
            "feels_like": 14.1,
            "temp_min": 13.2,
            "temp_max": 15.5,
            "pressure": 1014,
            "humidity": 81
        },
        "visibility": 10000,
        "wind": {"speed": 4.12, "deg": 230},
        "clouds": {"all": 75},
        "dt": 1684929490,
        "sys": {"country": "GB"},
        "timezone": 3600,
        "name": "London",
        "id": 2643743
    }


@pytest.fixture
def provider():
    """Create OpenWeather provider instance."""
    return OpenWeatherProvider(api_key="test_key")


def _ok_response(data):
    mock_response = Mock()
    mock_response.ok = True
    mock_response.status_code = 200
    mock_response.json.return_value = data
    return mock_response


def test_openweather_provider_success(provider, sample_openweather_response):
    """Test successful API call and parsing."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        weather = provider.get_current(CityQuery("London"))

        assert isinstance(weather, WeatherResult)
        assert weather.name == "London"
        assert weather.country == "GB"
        assert weather.condition_main == "Clouds"
        assert weather.temp == 14.6
        assert weather.temp_min == 13.2
        assert weather.temp_max == 15.5
        assert weather.humidity == 81.0
        assert weather.wind_speed == 4.12
        assert weather.utc_offset == 3600


def test_city_request_shape(provider, sample_openweather_response):
    """Test that a city lookup sends q, metric units and the key."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        provider.get_current(CityQuery("London"))

        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        assert url == "https://api.openweathermap.org/data/2.5/weather"
        assert params == {"q": "London", "units": "metric", "APPID": "test_key"}
        assert list(params) == ["q", "units", "APPID"]
        assert mock_get.call_args.kwargs["timeout"] == 10


def test_coordinates_request_shape(provider, sample_openweather_response):
    """Test that a coordinates lookup sends lat/lon instead of q."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        provider.get_current(CoordinatesQuery(lat=51.5, lon=-0.12))

        params = mock_get.call_args.kwargs["params"]
        assert params == {"lat": 51.5, "lon": -0.12, "units": "metric", "APPID": "test_key"}
        assert "q" not in params


def test_injected_http_get(sample_openweather_response):
    """Test that an injected fetcher is used instead of requests.get."""
    http_get = Mock(return_value=_ok_response(sample_openweather_response))
    provider = OpenWeatherProvider(
        api_key="k",
        base_url="http://localhost:8080/api",
        timeout=3,
        http_get=http_get,
    )

    weather = provider.get_current(CityQuery("London"))

    assert weather.name == "London"
    http_get.assert_called_once()
    assert http_get.call_args.args[0] == "http://localhost:8080/api/weather"
    assert http_get.call_args.kwargs["timeout"] == 3


def test_empty_city_is_sent_as_is(provider, sample_openweather_response):
    """Test that an empty query is not rejected locally."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        provider.get_current(CityQuery(""))

        assert mock_get.call_args.kwargs["params"]["q"] == ""


def test_openweather_provider_missing_wind(provider, sample_openweather_response):
    """Test handling of missing wind block."""
    del sample_openweather_response["wind"]

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "missing 'wind' block" in str(exc_info.value)


@pytest.mark.parametrize("block,field", [("sys", "country"), ("wind", "speed")])
def test_openweather_provider_missing_country_or_speed(provider, sample_openweather_response, block, field):
    """Test that a missing country or wind speed rejects the whole response."""
    del sample_openweather_response[block][field]
    sample_openweather_response[block]["other"] = 1

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "Failed to parse response" in str(exc_info.value)


def test_openweather_provider_not_found(provider):
    """Test handling of a 404 for an unknown city."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 404
        mock_response.json.return_value = {
            "cod": "404",
            "message": "city not found"
        }
        mock_get.return_value = mock_response

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("Nowhereville"))

        assert exc_info.value.status_code == 404
        assert "city not found" in str(exc_info.value)


def test_openweather_provider_http_error(provider):
    """Test handling of HTTP errors."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 401
        mock_response.json.return_value = {
            "cod": 401,
            "message": "Invalid API key"
        }
        mock_get.return_value = mock_response

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "401" in str(exc_info.value)
        assert "Invalid API key" in str(exc_info.value)


def test_openweather_provider_non_json_error(provider):
    """Test handling of an error response that is not JSON."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 502
        mock_response.text = "<html>Bad Gateway</html>"
        mock_response.json.side_effect = ValueError("No JSON")
        mock_get.return_value = mock_response

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CoordinatesQuery(51.5, -0.12))

        assert exc_info.value.status_code == 502
        assert "HTTP 502" in str(exc_info.value)


def test_openweather_provider_network_error(provider):
    """Test handling of network errors."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "Network error" in str(exc_info.value)
        assert exc_info.value.status_code is None


def test_openweather_provider_invalid_json(provider):
    """Test handling of a 200 with an unparseable body."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = True
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "Failed to parse response" in str(exc_info.value)


def test_openweather_provider_missing_main(provider, sample_openweather_response):
    """Test handling of missing main block."""
    del sample_openweather_response["main"]

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "missing 'main' block" in str(exc_info.value)


def test_openweather_provider_missing_weather(provider, sample_openweather_response):
    """Test handling of empty 'weather' array."""
    sample_openweather_response["weather"] = []

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "missing 'weather' array" in str(exc_info.value)


def test_openweather_provider_missing_sys(provider, sample_openweather_response):
    """Test handling of missing sys block."""
    del sample_openweather_response["sys"]

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "missing 'sys' block" in str(exc_info.value)


def test_openweather_provider_missing_field(provider, sample_openweather_response):
    """Test that a partial main block rejects the whole response."""
    del sample_openweather_response["main"]["temp_max"]

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = _ok_response(sample_openweather_response)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current(CityQuery("London"))

        assert "Failed to parse response" in str(exc_info.value)

import asyncio

import httpx
import pytest

from cityscope.errors import MalformedPayload, MissingParameter, TransportError, UpstreamRejected
from cityscope.upstream import AirQualityClient, DemographicsClient, WeatherClient

OWM_COLOMBO = {
    "coord": {"lon": 79.8478, "lat": 6.9319},
    "weather": [{"id": 721, "main": "Haze", "description": "haze"}],
    "main": {"temp": 28.4, "humidity": 70},
    "sys": {"country": "LK"},
    "name": "Colombo",
}


def _run(handler, make_client, *args):
    """Build a client on a mocked transport, make one fetch, return (result, seen requests)."""
    seen = []

    def _record(request):
        seen.append(request)
        return handler(request)

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_record)) as http:
            return await make_client(http).fetch(*args)

    return asyncio.run(go()), seen


def _weather(http):
    return WeatherClient(http, "https://owm.test/weather", "k3y", timeout=2)


def test_weather_success_parses_payload():
    result, seen = _run(lambda r: httpx.Response(200, json=OWM_COLOMBO), _weather, "colombo")
    assert result.ok
    w = result.payload
    assert (w.city_name, w.country) == ("Colombo", "LK")
    assert (w.latitude, w.longitude) == (6.9319, 79.8478)
    assert w.temp_c == 28.4 and w.humidity_pct == 70 and w.condition == "haze"

    assert len(seen) == 1
    params = seen[0].url.params
    assert params["q"] == "colombo"
    assert params["appid"] == "k3y"
    assert params["units"] == "metric"


def test_weather_404_is_rejected_with_status():
    result, seen = _run(lambda r: httpx.Response(404, json={"cod": "404"}), _weather, "Atlantis")
    assert not result.ok
    assert isinstance(result.error, UpstreamRejected)
    assert result.status_code == 404
    assert len(seen) == 1  # no retries


def test_timeout_becomes_transport_failure():
    def boom(request):
        raise httpx.ReadTimeout("too slow", request=request)

    result, _ = _run(boom, _weather, "Colombo")
    assert not result.ok
    assert isinstance(result.error, TransportError)
    assert result.error.tag == "timeout"


def test_connect_error_becomes_transport_failure():
    def boom(request):
        raise httpx.ConnectError("dns", request=request)

    result, _ = _run(boom, _weather, "Colombo")
    assert isinstance(result.error, TransportError)
    assert result.error.tag == "transport"


def test_unexpected_shape_is_malformed():
    result, _ = _run(lambda r: httpx.Response(200, json={"name": "Colombo"}), _weather, "Colombo")
    assert isinstance(result.error, MalformedPayload)

    result, _ = _run(lambda r: httpx.Response(200, text="<html>"), _weather, "Colombo")
    assert isinstance(result.error, MalformedPayload)


def test_blank_city_makes_no_request():
    result, seen = _run(lambda r: httpx.Response(200, json=OWM_COLOMBO), _weather, "  ")
    assert isinstance(result.error, MissingParameter)
    assert seen == []


def test_air_quality_success_and_nulls():
    make = lambda http: AirQualityClient(http, "https://aq.test/air-quality")
    body = {"current": {"time": "2025-03-01T09:00", "us_aqi": 57, "pm2_5": 14.3}}
    result, seen = _run(lambda r: httpx.Response(200, json=body), make, 6.93, 79.85)
    assert result.payload.aqi == 57
    assert result.payload.pm2_5 == 14.3
    params = seen[0].url.params
    assert params["latitude"] == "6.93"
    assert params["current"] == "us_aqi,pm2_5"

    body = {"current": {"us_aqi": None, "pm2_5": None}}
    result, _ = _run(lambda r: httpx.Response(200, json=body), make, 6.93, 79.85)
    assert result.payload.aqi is None and result.payload.pm2_5 is None


def test_air_quality_requires_coordinates():
    make = lambda http: AirQualityClient(http, "https://aq.test/air-quality")
    result, seen = _run(lambda r: httpx.Response(200, json={}), make, None, 79.85)
    assert isinstance(result.error, MissingParameter)
    assert seen == []


def _geodb(http):
    return DemographicsClient(http, "https://geo.test/cities", "rapid", "geo.test")


def test_demographics_takes_first_match():
    body = {"data": [
        {"name": "Colombo", "population": 752993, "elevationMeters": 7},
        {"name": "Colombo District", "population": 2324349, "elevationMeters": 12},
    ]}
    result, seen = _run(lambda r: httpx.Response(200, json=body), _geodb, "Colombo", "LK")
    assert result.payload.population == 752993
    assert result.payload.elevation_m == 7
    req = seen[0]
    assert req.url.params["namePrefix"] == "Colombo"
    assert req.url.params["countryIds"] == "LK"
    assert req.headers["X-RapidAPI-Key"] == "rapid"
    assert req.headers["X-RapidAPI-Host"] == "geo.test"


def test_demographics_no_match_is_empty_reading():
    result, _ = _run(lambda r: httpx.Response(200, json={"data": []}), _geodb, "Nowhere", "LK")
    assert result.ok
    assert result.payload.population is None
    assert result.payload.elevation_m is None


def test_demographics_rate_limited():
    result, _ = _run(lambda r: httpx.Response(429), _geodb, "Colombo", "LK")
    assert result.status_code == 429


def test_null_sections_are_malformed_not_raised():
    make = lambda http: AirQualityClient(http, "https://aq.test/air-quality")
    result, _ = _run(lambda r: httpx.Response(200, json={"current": None}), make, 6.93, 79.85)
    assert isinstance(result.error, MalformedPayload)

    result, _ = _run(lambda r: httpx.Response(200, json={"data": [None]}), _geodb, "Colombo", "LK")
    assert isinstance(result.error, MalformedPayload)


def test_invalid_url_becomes_transport_failure():
    def boom(request):
        raise httpx.InvalidURL("bad host")

    result, _ = _run(boom, _weather, "Colombo")
    assert isinstance(result.error, TransportError)
    assert result.error.tag == "invalid_url"


def test_base_client_cannot_be_used_directly():
    from cityscope.upstream import UpstreamClient

    with pytest.raises(TypeError):
        UpstreamClient(httpx.AsyncClient(), "https://x.test")

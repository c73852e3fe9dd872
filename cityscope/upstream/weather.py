from __future__ import annotations

from dataclasses import dataclass

import httpx

from cityscope.errors import MissingParameter
from .base import Failure, UpstreamClient, UpstreamResult


@dataclass(frozen=True)
class WeatherReading:
    """Current conditions as reported by OpenWeatherMap (metric units)."""
    city_name: str
    country: str
    latitude: float
    longitude: float
    temp_c: float
    humidity_pct: float
    condition: str


class WeatherClient(UpstreamClient[WeatherReading]):
    """OpenWeatherMap current weather by free-text city name."""

    name = "weather"

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: str, timeout: float = 10.0):
        super().__init__(http, base_url, timeout)
        self.api_key = api_key

    async def fetch(self, city: str) -> UpstreamResult[WeatherReading]:
        city = (city or "").strip()
        if not city:
            return Failure(MissingParameter("city"))
        return await self._get({"q": city, "appid": self.api_key, "units": "metric"})

    def parse(self, body: dict) -> WeatherReading:
        return WeatherReading(
            city_name=body["name"],
            country=body["sys"]["country"],
            latitude=float(body["coord"]["lat"]),
            longitude=float(body["coord"]["lon"]),
            temp_c=float(body["main"]["temp"]),
            humidity_pct=float(body["main"]["humidity"]),
            condition=body["weather"][0]["description"],
        )

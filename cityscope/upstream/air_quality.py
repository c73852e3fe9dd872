from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cityscope.errors import MissingParameter
from .base import Failure, UpstreamClient, UpstreamResult, _opt_float


@dataclass(frozen=True)
class AirQualityReading:
    aqi: Optional[float]      # US AQI
    pm2_5: Optional[float]    # µg/m³


class AirQualityClient(UpstreamClient[AirQualityReading]):
    """Open-Meteo air quality, current US AQI and PM2.5 at a coordinate."""

    name = "air_quality"

    async def fetch(self, latitude: Optional[float], longitude: Optional[float]) -> UpstreamResult[AirQualityReading]:
        if latitude is None or longitude is None:
            return Failure(MissingParameter("latitude/longitude"))
        return await self._get({
            "latitude": latitude,
            "longitude": longitude,
            "current": "us_aqi,pm2_5",
        })

    def parse(self, body: dict) -> AirQualityReading:
        current = body["current"]
        return AirQualityReading(
            aqi=_opt_float(current.get("us_aqi")),
            pm2_5=_opt_float(current.get("pm2_5")),
        )

import asyncio
import logging
from datetime import datetime

import httpx

from cityscope.errors import MissingParameter, WeatherUnavailable
from cityscope.normalizers import merge, norm_air_quality, norm_demographics
from cityscope.records import NormalizedRecord
from cityscope.settings import Settings
from cityscope.upstream import AirQualityClient, DemographicsClient, Failure, WeatherClient

log = logging.getLogger(__name__)


class Aggregator:
    """
    Weather first (it supplies coordinates + country code), then air quality
    and demographics concurrently. Only the weather step can fail the lookup.
    """

    def __init__(
        self,
        weather: WeatherClient,
        air_quality: AirQualityClient,
        demographics: DemographicsClient,
        population_locale: str = "en_US",
    ):
        self.weather = weather
        self.air_quality = air_quality
        self.demographics = demographics
        self.population_locale = population_locale

    async def aggregate(self, city_name: str, now: datetime) -> NormalizedRecord:
        city_name = (city_name or "").strip()
        if not city_name:
            raise MissingParameter("city")

        w = await self.weather.fetch(city_name)
        if isinstance(w, Failure):
            log.info("weather lookup failed for %r: %s", city_name, w.reason)
            raise WeatherUnavailable(w.error)
        reading = w.payload

        # Clients never raise, so neither task can cancel its sibling.
        async with asyncio.TaskGroup() as tg:
            aq_task = tg.create_task(self.air_quality.fetch(reading.latitude, reading.longitude))
            demo_task = tg.create_task(self.demographics.fetch(reading.city_name, reading.country))
        aq, demo = aq_task.result(), demo_task.result()

        if isinstance(aq, Failure):
            log.warning("air quality unavailable for %s: %s", reading.city_name, aq.reason)
        if isinstance(demo, Failure):
            log.warning("demographics unavailable for %s: %s", reading.city_name, demo.reason)

        record = merge(
            reading,
            norm_air_quality(aq),
            norm_demographics(demo, self.population_locale),
            now,
        )
        log.info("aggregated %s,%s: %s°C aqi=%s",
                 record.city_name, record.country, record.weather.display_temp, record.air_quality.aqi)
        return record


def build_aggregator(http: httpx.AsyncClient, settings: Settings) -> Aggregator:
    """Wire the three provider clients from configuration onto one shared HTTP client."""
    t = settings.upstream_timeout
    return Aggregator(
        weather=WeatherClient(http, settings.openweather_url, settings.openweather_api_key, timeout=t),
        air_quality=AirQualityClient(http, settings.air_quality_url, timeout=t),
        demographics=DemographicsClient(
            http, settings.geodb_url, settings.geodb_api_key, settings.geodb_host, timeout=t
        ),
        population_locale=settings.population_locale,
    )

from datetime import datetime
from decimal import Decimal
from typing import Optional

from babel.numbers import format_decimal

from cityscope.records import AirQuality, Demographics, NormalizedRecord, Weather
from cityscope.upstream import (
    AirQualityReading,
    DemographicsReading,
    Failure,
    UpstreamResult,
    WeatherReading,
)

NA = "N/A"


def norm_weather(w: WeatherReading) -> Weather:
    """Weather is mandatory, so this only ever sees a successful reading."""
    return Weather(temp_c=w.temp_c, humidity_pct=w.humidity_pct, condition=w.condition)


def norm_air_quality(result: UpstreamResult[AirQualityReading]) -> AirQuality:
    """Fold an air-quality result into the record part; failures become placeholders."""
    if isinstance(result, Failure):
        return AirQuality()
    r = result.payload
    return AirQuality(
        aqi=r.aqi if r.aqi is not None else 0,
        pollutant_summary=pollutant_summary(r.pm2_5),
    )


def norm_demographics(result: UpstreamResult[DemographicsReading], locale: str) -> Demographics:
    if isinstance(result, Failure):
        return Demographics()
    r = result.payload
    return Demographics(
        population=format_population(r.population, locale),
        elevation=format_elevation(r.elevation_m),
    )


def merge(
    w: WeatherReading, air: AirQuality, demo: Demographics, now: datetime
) -> NormalizedRecord:
    """Pure merge of the three partials into one record."""
    return NormalizedRecord(
        city_name=w.city_name,
        country=w.country,
        captured_at=now,
        weather=norm_weather(w),
        air_quality=air,
        demographics=demo,
    )


# --- Individual field formatters ---

def _plain_number(v: float) -> str:
    """12.0 -> '12', 12.5 -> '12.5', 1e-05 -> '0.00001' (shortest digits, never exponent form)."""
    v = float(v)
    return str(int(v)) if v.is_integer() else format(Decimal(repr(v)), "f")

def pollutant_summary(pm2_5: Optional[float]) -> str:
    return f"PM2.5: {NA if pm2_5 is None else _plain_number(pm2_5)}"

def format_population(population: Optional[int], locale: str) -> str:
    """Thousands-separated in the configured locale, e.g. 752993 -> '752,993' for en_US."""
    if population is None:
        return NA
    return format_decimal(population, locale=locale)

def format_elevation(meters: Optional[float]) -> str:
    if meters is None:
        return NA
    return f"{int(round(meters))}m"

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# -----------------------------
# Canonical record shapes.
# Attributes are snake_case in Python, camelCase on the wire.
# -----------------------------
_FROZEN = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Weather(BaseModel):
    model_config = _FROZEN
    temp_c: float
    humidity_pct: float
    condition: str

    @property
    def display_temp(self) -> int:
        """Temperature rounded to the nearest whole degree (storage keeps the raw value)."""
        return int(round(self.temp_c))


class AirQuality(BaseModel):
    model_config = _FROZEN
    aqi: float = 0
    pollutant_summary: str = "PM2.5: N/A"


class Demographics(BaseModel):
    model_config = _FROZEN
    population: str = "N/A"
    elevation: str = "N/A"


class NormalizedRecord(BaseModel):
    """One city snapshot. Immutable: use model_copy(update=...) to derive a new one."""
    model_config = _FROZEN

    city_name: str
    country: str
    captured_at: datetime
    weather: Weather
    air_quality: AirQuality = AirQuality()
    demographics: Demographics = Demographics()
    owner: Optional[str] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class HistoryPoint(BaseModel):
    """Chart-sized projection of a stored record."""
    model_config = _FROZEN
    captured_at: datetime
    temp_c: float
    aqi: float


class SnapshotPayload(BaseModel):
    """
    Body accepted by the save endpoint. Same shape as NormalizedRecord, but
    capturedAt / owner are ignored: the server stamps both at save time.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    city_name: str
    country: str
    weather: Weather
    air_quality: AirQuality = AirQuality()
    demographics: Demographics = Demographics()

    def to_record(self, now: datetime) -> NormalizedRecord:
        return NormalizedRecord(
            city_name=self.city_name,
            country=self.country,
            captured_at=now,
            weather=self.weather,
            air_quality=self.air_quality,
            demographics=self.demographics,
        )

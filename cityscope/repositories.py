import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cityscope.errors import StorageFailure, Unauthenticated
from cityscope.models import CitySnapshot
from cityscope.records import AirQuality, Demographics, NormalizedRecord, Weather

log = logging.getLogger(__name__)


def _to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _city_key(city_name: str | None) -> str:
    # SQLite lower() only folds ASCII, so the key is computed here
    return (city_name or "").strip().casefold()


def _from_row(row: CitySnapshot) -> NormalizedRecord:
    captured = row.captured_at
    if captured.tzinfo is None:
        captured = captured.replace(tzinfo=timezone.utc)
    return NormalizedRecord(
        city_name=row.city_name,
        country=row.country,
        captured_at=captured,
        weather=Weather(temp_c=row.temp_c, humidity_pct=row.humidity_pct, condition=row.condition),
        air_quality=AirQuality(aqi=row.aqi, pollutant_summary=row.pollutant_summary),
        demographics=Demographics(population=row.population, elevation=row.elevation),
        owner=row.owner,
    )


def save_snapshot(db: Session, record: NormalizedRecord, owner: str | None) -> str:
    """
    Append one record for `owner` and return its generated id.
    The caller's record is left untouched; the stored copy carries the owner.
    """
    owner = (owner or "").strip()
    if not owner:
        log.warning("snapshot rejected: no owner (city=%s)", record.city_name)
        raise Unauthenticated("an owner is required to save a snapshot")

    owned = record.model_copy(update={"owner": owner})
    record_id = uuid.uuid4().hex
    row = CitySnapshot(
        record_id=record_id,
        owner=owned.owner,
        city_name=owned.city_name,
        city_key=_city_key(owned.city_name),
        country=owned.country,
        captured_at=_to_naive_utc(owned.captured_at),
        temp_c=owned.weather.temp_c,
        humidity_pct=owned.weather.humidity_pct,
        condition=owned.weather.condition,
        aqi=owned.air_quality.aqi,
        pollutant_summary=owned.air_quality.pollutant_summary,
        population=owned.demographics.population,
        elevation=owned.demographics.elevation,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("snapshot insert failed: owner=%s city=%s", owner, record.city_name)
        raise StorageFailure(str(e)) from e
    return record_id


def query_snapshots(db: Session, owner: str, city_name: str) -> list[NormalizedRecord]:
    """All of `owner`'s snapshots for a city (case-insensitive), oldest first."""
    city = _city_key(city_name)
    if not owner or not city:
        return []
    stmt = (
        select(CitySnapshot)
        .where(CitySnapshot.owner == owner, CitySnapshot.city_key == city)
        .order_by(CitySnapshot.captured_at, CitySnapshot.pk)
    )
    return [_from_row(r) for r in db.execute(stmt).scalars().all()]

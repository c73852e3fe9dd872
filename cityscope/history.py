from sqlalchemy.orm import Session

from cityscope.errors import Unauthenticated
from cityscope.records import HistoryPoint
from cityscope.repositories import query_snapshots


def read_history(db: Session, owner: str | None, city_name: str) -> list[HistoryPoint]:
    """Time series for charting: (capturedAt, tempC, aqi) per saved snapshot, oldest first."""
    if not owner:
        raise Unauthenticated("login required to read history")
    return [
        HistoryPoint(captured_at=r.captured_at, temp_c=r.weather.temp_c, aqi=r.air_quality.aqi)
        for r in query_snapshots(db, owner, city_name)
    ]

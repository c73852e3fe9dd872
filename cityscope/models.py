from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from .db import Base

# -----------------------------
# ORM model (table) for persisted city snapshots
# -----------------------------
class CitySnapshot(Base):
    __tablename__ = "city_snapshots"
    # One saved NormalizedRecord, flattened. Append-only.
    pk                = Column(Integer, primary_key=True, autoincrement=True)  # insertion order
    record_id         = Column(String(32), unique=True, index=True, nullable=False)  # uuid hex, handed to callers
    owner             = Column(String, nullable=False)          # display name from the identity provider
    city_name         = Column(String, nullable=False)
    city_key          = Column(String, nullable=False)          # city_name.casefold(), the lookup key
    country           = Column(String, nullable=False)
    captured_at       = Column(DateTime(timezone=True), nullable=False)  # stored as naive UTC

    temp_c            = Column(Float, nullable=False)
    humidity_pct      = Column(Float, nullable=False)
    condition         = Column(String, nullable=False)

    aqi               = Column(Float, nullable=False)
    pollutant_summary = Column(String, nullable=False)

    population        = Column(String, nullable=False)          # already formatted, may be "N/A"
    elevation         = Column(String, nullable=False)

    __table_args__ = (Index("ix_city_snapshots_owner_city", "owner", "city_key"),)

    def __repr__(self):
        return f"<CitySnapshot(record_id={self.record_id}, owner={self.owner}, city={self.city_name}, at={self.captured_at})>"

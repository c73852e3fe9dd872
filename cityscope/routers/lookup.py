from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from cityscope.aggregator import Aggregator
from cityscope.deps import get_aggregator
from cityscope.errors import MissingParameter, WeatherUnavailable

# --------------------------------------------------------------------
# Router setup
# --------------------------------------------------------------------
router = APIRouter(prefix="/api", tags=["lookup"])


@router.get("/city")
async def lookup_city(
    city: str = Query("", description="Free-text city name"),
    aggregator: Aggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """
    Look up one city across weather, air quality and demographics and
    return the merged snapshot (not persisted).

    Errors:
      400  city missing
      404  weather provider doesn't know the city
      502  weather provider failed for any other reason
    Air-quality / demographics outages never fail the request; their
    fields come back as placeholders ("PM2.5: N/A", "N/A", aqi 0).
    """
    try:
        record = await aggregator.aggregate(city, datetime.now(timezone.utc))
    except MissingParameter as e:
        raise HTTPException(400, str(e))
    except WeatherUnavailable as e:
        if e.city_not_found:
            raise HTTPException(404, "City not found")
        raise HTTPException(502, "Weather data is unavailable")
    return record.to_json()

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from cityscope.db import get_db
from cityscope.deps import api_key_header, check_api_key, current_user
from cityscope.errors import Forbidden, StorageFailure, Unauthenticated
from cityscope.history import read_history
from cityscope.records import SnapshotPayload
from cityscope.repositories import save_snapshot
from cityscope.settings import Settings, get_settings

router = APIRouter(prefix="/api", tags=["snapshots"])


async def raw_body(request: Request) -> bytes:
    # Unparsed on purpose: the body is only looked at once the caller is authorized
    return await request.body()


@router.post("/save-city-data")
def save_city_data(
    body: bytes = Depends(raw_body),
    api_key: Optional[str] = Depends(api_key_header),
    user: Optional[str] = Depends(current_user),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Persist a snapshot for the logged-in user.

    Checks run in this order so clients can tell the cases apart:
      403  x-api-key header missing or wrong (identity not consulted)
      401  key fine, but no identity
      422  body isn't a snapshot (only checked once the caller is authorized)
    capturedAt is stamped here; anything the client sent is ignored.
    """
    try:
        check_api_key(api_key, settings)
    except Forbidden:
        raise HTTPException(403, "Forbidden: Invalid API Key")
    if not user:
        raise HTTPException(401, "Unauthorized: Please login")

    try:
        payload = SnapshotPayload.model_validate_json(body or b"null")
    except ValidationError as e:
        raise HTTPException(422, [{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in e.errors()])

    record = payload.to_record(datetime.now(timezone.utc))
    try:
        record_id = save_snapshot(db, record, user)
    except StorageFailure:
        raise HTTPException(500, "Database error")
    return {"message": "Data successfully stored!", "id": record_id}


@router.get("/history")
def history(
    city: str = Query(..., description="City name, case-insensitive exact match"),
    user: Optional[str] = Depends(current_user),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Caller's saved snapshots for `city`, oldest first, projected for charting."""
    try:
        points = read_history(db, user, city)
    except Unauthenticated:
        raise HTTPException(401, "Unauthorized: Please login")
    return [p.model_dump(mode="json", by_alias=True) for p in points]

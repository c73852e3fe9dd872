import hmac
from typing import Optional

from fastapi import Depends, Header, Request

from cityscope.aggregator import Aggregator, build_aggregator
from cityscope.errors import Forbidden
from cityscope.settings import Settings, get_settings


def current_user(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    """
    Display name set by the fronting identity provider, or None.
    We never authenticate here; a missing/blank header just means "anonymous".
    """
    name = (request.headers.get(settings.identity_header) or "").strip()
    return name or None


def check_api_key(provided: Optional[str], settings: Settings) -> None:
    """Constant-time compare against APP_API_KEY. An unset key rejects everything."""
    expected = settings.app_api_key
    if not expected or provided is None:
        raise Forbidden("invalid API key")
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise Forbidden("invalid API key")


def api_key_header(x_api_key: Optional[str] = Header(None)) -> Optional[str]:
    return x_api_key


def get_aggregator(request: Request, settings: Settings = Depends(get_settings)) -> Aggregator:
    # Shared httpx.AsyncClient lives on app.state (see main.lifespan)
    return build_aggregator(request.app.state.http, settings)

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import engine, Base
from .deps import current_user
from .routers.lookup import router as lookup_router
from .routers.snapshots import router as snapshots_router
from cityscope.settings import get_settings
from cityscope.setup_logging import setup_logging

# --------------------------------------------------------------------
# App bootstrap
# --------------------------------------------------------------------
settings = get_settings()
setup_logging(settings.log_level) # Init Logging

# Create database tables if they don’t exist.
Base.metadata.create_all(bind=engine)

# --------------------------------------------------------------------
# FastAPI application with lifespan hook
# --------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    One pooled HTTP client for all upstream lookups, opened at startup
    and closed at shutdown.
    """
    async with httpx.AsyncClient(timeout=settings.upstream_timeout) as http:
        app.state.http = http
        yield

# Create the FastAPI app instance
app = FastAPI(title="cityscope", lifespan=lifespan)

# The browser client lives on another origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------
@app.get("/healthz")
def health():
    """Simple health check for monitoring."""
    return {"ok": True, "service": "cityscope", "version": 1}

@app.get("/current-user")
def whoami(user: Optional[str] = Depends(current_user)):
    """Identity as seen by this service, or null when anonymous."""
    return {"displayName": user} if user else None

# Register API routers:
app.include_router(lookup_router)
app.include_router(snapshots_router)

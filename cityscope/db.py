from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .settings import get_settings

ENGINE_URL = get_settings().database_url
# sessions hop between FastAPI threadpool workers
_connect_args = {"check_same_thread": False} if ENGINE_URL.startswith("sqlite") else {}
engine = create_engine(ENGINE_URL, connect_args=_connect_args, future=True, echo=False)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

"""Engine and per-request sessions for the budgeting data store"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from budget_health.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pooling for Postgres; SQLite (local runs) shares one file across threads instead"""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """One session per request; goal writes commit individually through it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

"""
Database wiring for the cutoff store.

DATABASE_URL points at Postgres in deployment. SQLite URLs are accepted
for local runs and tests.
"""

import os
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase
from dotenv import load_dotenv
from contextlib import contextmanager

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL env var not set")


class Base(DeclarativeBase):
    pass


def engine_options(url: str) -> dict:
    """Keyword arguments for create_engine, by backend."""
    options = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints on worker threads
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = int(os.getenv("DB_POOL_SIZE", 5))
        options["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", 10))
    return options


engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@contextmanager
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def ping_database(db: Session) -> None:
    """Round-trip a trivial query; raises if the database is unreachable."""
    db.execute(text("SELECT 1"))

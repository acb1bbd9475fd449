"""Database engine/session setup for SQLAlchemy."""

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from field_service.core.config import DATABASE_URL


def _connect_args(url: str) -> dict:
    # check_same_thread is required for SQLite with FastAPI's threadpool.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL),
    pool_pre_ping=True,
)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    if dbapi_connection.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Session factory used by request-scoped dependencies.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=Session)

# Declarative base class for ORM models.
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Provide a DB session per request and ensure it is closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

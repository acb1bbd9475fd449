"""Database initialization utilities."""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from field_service.db import models  # noqa: F401 - ensure model metadata is registered
from field_service.db.session import Base, engine as default_engine

logger = logging.getLogger(__name__)

# Columns added after the first schema revision. Older databases get them
# through additive ALTER TABLE statements.
ADDITIVE_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("service_reports", "next_service_date", "next_service_date DATE"),
    ("customers", "business_name", "business_name VARCHAR(255)"),
    ("customers", "office_phone", "office_phone VARCHAR(32)"),
    ("customers", "mobile_phone", "mobile_phone VARCHAR(32)"),
    ("service_report_photos", "caption", "caption VARCHAR(500)"),
)


def _table_exists(engine: Engine, table_name: str) -> bool:
    return table_name in inspect(engine).get_table_names()


def _get_columns(engine: Engine, table_name: str) -> set[str]:
    if not _table_exists(engine, table_name):
        return set()
    return {column["name"] for column in inspect(engine).get_columns(table_name)}


def _ensure_column(engine: Engine, table_name: str, column_name: str, column_ddl: str) -> None:
    if column_name in _get_columns(engine, table_name):
        return

    with engine.begin() as connection:
        connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_ddl}"))
    logger.info("Added column %s.%s", table_name, column_name)


def _ensure_index(engine: Engine, table_name: str, index_name: str, columns: list[str]) -> None:
    if not _table_exists(engine, table_name):
        return

    columns_sql = ", ".join(columns)
    with engine.begin() as connection:
        connection.execute(
            text(
                f"CREATE INDEX IF NOT EXISTS {index_name} "
                f"ON {table_name} ({columns_sql})"
            )
        )


def _backfill_photo_order(engine: Engine) -> None:
    if "order_index" not in _get_columns(engine, "service_report_photos"):
        return

    with engine.begin() as connection:
        connection.execute(
            text(
                "UPDATE service_report_photos "
                "SET order_index = 0 "
                "WHERE order_index IS NULL"
            )
        )


def init_db(engine: Engine | None = None) -> None:
    """Create and migrate schema in a SQLite-safe, additive manner."""
    engine = engine or default_engine
    try:
        Base.metadata.create_all(bind=engine)

        for table_name, column_name, column_ddl in ADDITIVE_COLUMNS:
            _ensure_column(
                engine,
                table_name=table_name,
                column_name=column_name,
                column_ddl=column_ddl,
            )

        _backfill_photo_order(engine)
        _ensure_index(
            engine,
            table_name="service_report_photos",
            index_name="idx_service_report_photos_order",
            columns=["service_report_id", "order_index"],
        )
    except SQLAlchemyError:
        logger.exception("Database initialization failed.")
        raise

"""FastAPI entrypoint for the field-service back office.

This file stays intentionally small so feature modules can be added cleanly:
- `routes/` for API endpoints and the two dispatch callables
- `services/` for customer, report, photo and notification logic
- `dashboard/` for read-side display rules
- `db/` for SQLAlchemy models and session management
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from field_service.core.config import STORAGE_BUCKET, STORAGE_DIR
from field_service.core.domain_exceptions import DomainException
from field_service.core.exceptions import (
    domain_exception_handler,
    http_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from field_service.core.middleware import RequestContextMiddleware, RequestIdLogFilter
from field_service.db.init_db import init_db
from field_service.routes import auth, customers, dashboard, functions, reports, storage
from field_service.services.storage import get_storage

_log_handler = logging.StreamHandler()
_log_handler.addFilter(RequestIdLogFilter())
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s",
    handlers=[_log_handler],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize app resources before serving traffic."""
    # Ensure SQL tables exist at app startup.
    init_db()
    logger.info("Database tables initialized.")

    # Photo bucket directory must exist before blobs are served.
    get_storage()
    yield


app = FastAPI(
    title="Field Service API",
    version="0.1.0",
    description="Customers, service reports, report emails and SMS reminders.",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)

app.include_router(auth.router)
app.include_router(customers.router)
app.include_router(reports.router)
app.include_router(storage.router)
app.include_router(functions.router)
app.include_router(dashboard.router)

app.mount(
    f"/storage/{STORAGE_BUCKET}",
    StaticFiles(directory=STORAGE_DIR, check_dir=False),
    name="photos",
)


@app.get("/", tags=["health"])
def root() -> dict[str, str]:
    """Simple status endpoint for uptime checks."""
    return {"status": "Field Service API Running"}

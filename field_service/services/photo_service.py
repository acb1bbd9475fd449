"""Batch photo uploads.

Every file in a batch is stored independently; one bad file never aborts the
others, and only stored files get a photo record.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from field_service.db.models import ReportPhoto
from field_service.services.report_service import get_report
from field_service.services.storage import (
    LocalObjectStorage,
    StorageError,
    allowed_photo_file,
)

logger = logging.getLogger(__name__)

MAX_PARALLEL_UPLOADS = 4


@dataclass
class PhotoFile:
    filename: str
    content: bytes


@dataclass
class UploadOutcome:
    filename: str
    photo_url: str | None = None
    photo: ReportPhoto | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.photo_url is not None


def _store_one(storage: LocalObjectStorage, upload: PhotoFile) -> UploadOutcome:
    if not allowed_photo_file(upload.filename):
        return UploadOutcome(filename=upload.filename, error=f"Unsupported file type: {upload.filename}")
    if not upload.content:
        return UploadOutcome(filename=upload.filename, error=f"Empty file: {upload.filename}")

    try:
        key = storage.upload(storage.generate_key(upload.filename), upload.content)
    except StorageError as exc:
        logger.error("Error uploading photo %s: %s", upload.filename, exc)
        return UploadOutcome(filename=upload.filename, error=f"Failed to upload {upload.filename}")

    return UploadOutcome(filename=upload.filename, photo_url=storage.get_public_url(key))


def store_photos(storage: LocalObjectStorage, uploads: list[PhotoFile]) -> list[UploadOutcome]:
    """Store blobs concurrently. Results keep the order of `uploads`."""
    if not uploads:
        return []

    workers = min(MAX_PARALLEL_UPLOADS, len(uploads))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda upload: _store_one(storage, upload), uploads))


def _next_order_index(db: Session, report_id: str) -> int:
    highest = db.scalar(
        select(func.max(ReportPhoto.order_index))
        .where(ReportPhoto.service_report_id == report_id)
    )
    return 0 if highest is None else int(highest) + 1


def upload_report_photos(
    db: Session,
    storage: LocalObjectStorage,
    report_id: str,
    uploads: list[PhotoFile],
) -> list[UploadOutcome]:
    """Store a batch of photos and record the successful ones on the report."""
    get_report(db, report_id)
    outcomes = store_photos(storage, uploads)

    order_index = _next_order_index(db, report_id)
    for index, outcome in enumerate(outcomes):
        if not outcome.success:
            continue

        photo = ReportPhoto(
            service_report_id=report_id,
            photo_url=outcome.photo_url,
            order_index=order_index + index,
        )
        try:
            db.add(photo)
            db.commit()
            db.refresh(photo)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error inserting photo record for %s", outcome.filename)
            outcome.error = f"Failed to record {outcome.filename}"
            continue

        outcome.photo = photo

    stored = sum(1 for outcome in outcomes if outcome.success)
    logger.info(
        "Photo batch for report %s: %d stored, %d failed",
        report_id,
        stored,
        len(outcomes) - stored,
    )
    return outcomes

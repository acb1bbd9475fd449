"""Business logic for service reports and their lifecycle."""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from field_service.core.domain_exceptions import DomainException, NotFoundException
from field_service.core.error_codes import ErrorCode
from field_service.db.models import (
    REPORT_STATUS_COMPLETED,
    REPORT_STATUS_DRAFT,
    REPORT_STATUS_IN_PROGRESS,
    Customer,
    ReportPhoto,
    ServiceReport,
    SmsNotification,
    utcnow,
)
from field_service.schemas.report import ServiceReportCreate, ServiceReportPayload

logger = logging.getLogger(__name__)

# Nothing leaves `completed`.
ALLOWED_TRANSITIONS = {
    REPORT_STATUS_DRAFT: {REPORT_STATUS_IN_PROGRESS, REPORT_STATUS_COMPLETED},
    REPORT_STATUS_IN_PROGRESS: {REPORT_STATUS_COMPLETED},
    REPORT_STATUS_COMPLETED: set(),
}


def _ensure_customer_exists(db: Session, customer_id: str) -> None:
    if db.get(Customer, customer_id) is None:
        raise NotFoundException(
            code=ErrorCode.CUSTOMER_NOT_FOUND,
            message="Customer not found.",
        )


def get_report(db: Session, report_id: str) -> ServiceReport:
    report = db.scalar(
        select(ServiceReport)
        .options(
            joinedload(ServiceReport.customer),
            selectinload(ServiceReport.photos),
        )
        .where(ServiceReport.id == report_id)
    )
    if report is None:
        raise NotFoundException(
            code=ErrorCode.REPORT_NOT_FOUND,
            message="Report not found.",
        )
    return report


def list_reports(db: Session) -> list[ServiceReport]:
    """Return all reports with their customer, newest first."""
    return db.scalars(
        select(ServiceReport)
        .options(joinedload(ServiceReport.customer))
        .order_by(ServiceReport.created_at.desc())
    ).all()


def record_photos(db: Session, report_id: str, photo_urls: list[str], start_index: int = 0) -> list[ReportPhoto]:
    photos = [
        ReportPhoto(
            service_report_id=report_id,
            photo_url=url,
            order_index=start_index + offset,
        )
        for offset, url in enumerate(photo_urls)
    ]
    db.add_all(photos)
    db.commit()
    return photos


def create_report(db: Session, payload: ServiceReportCreate) -> ServiceReport:
    """Create a report in `draft` and attach any already-uploaded photos."""
    _ensure_customer_exists(db, payload.customer_id)

    now = utcnow()
    report = ServiceReport(
        **payload.model_dump(exclude={"photo_urls"}),
        status=REPORT_STATUS_DRAFT,
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(report)
        db.commit()
        db.refresh(report)
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Service report created",
        extra={"report_id": report.id, "customer_id": report.customer_id},
    )

    if payload.photo_urls:
        try:
            record_photos(db, report.id, payload.photo_urls)
        except SQLAlchemyError:
            # The report itself is saved; photos can be re-attached from the edit view.
            db.rollback()
            logger.exception("Failed to record photos for report %s", report.id)

    return report


def update_report(db: Session, report_id: str, payload: ServiceReportPayload) -> ServiceReport:
    """Full-record edit. Status is owned by the lifecycle operations."""
    report = get_report(db, report_id)
    if payload.customer_id != report.customer_id:
        _ensure_customer_exists(db, payload.customer_id)

    try:
        for field, value in payload.model_dump().items():
            setattr(report, field, value)
        report.updated_at = utcnow()

        db.commit()
        db.refresh(report)
        return report
    except SQLAlchemyError:
        db.rollback()
        raise


def transition_report(db: Session, report_id: str, new_status: str) -> ServiceReport:
    """Move a report forward through its lifecycle."""
    report = get_report(db, report_id)

    if new_status not in ALLOWED_TRANSITIONS.get(report.status, set()):
        raise DomainException(
            code=ErrorCode.INVALID_STATUS,
            message="Invalid status transition.",
        )

    try:
        report.status = new_status
        report.updated_at = utcnow()
        db.commit()
        db.refresh(report)
        return report
    except SQLAlchemyError:
        db.rollback()
        raise


def finalize_report(db: Session, report_id: str) -> ServiceReport:
    """Mark a report completed. Finalizing a completed report changes nothing."""
    report = get_report(db, report_id)
    if report.status == REPORT_STATUS_COMPLETED:
        return report

    return transition_report(db, report_id, REPORT_STATUS_COMPLETED)


def mark_sent_report_completed(db: Session, report: ServiceReport) -> bool:
    """Flip a draft to completed after its email went out.

    Returns False when the report was not a draft, including when another
    writer changed its status first. Any store failure is left
    to the caller, which must not treat it as an email failure.
    """
    if report.status != REPORT_STATUS_DRAFT:
        return False

    try:
        result = db.execute(
            update(ServiceReport)
            .where(ServiceReport.id == report.id)
            .where(ServiceReport.status == REPORT_STATUS_DRAFT)
            .values(status=REPORT_STATUS_COMPLETED, updated_at=utcnow())
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(report)
    return result.rowcount > 0


def delete_report(db: Session, report_id: str) -> None:
    """Delete a report, removing its photos first."""
    get_report(db, report_id)

    try:
        db.execute(
            delete(ReportPhoto)
            .where(ReportPhoto.service_report_id == report_id)
        )
        db.flush()

        # Notification rows outlive the report as customer history.
        db.execute(
            update(SmsNotification)
            .where(SmsNotification.service_report_id == report_id)
            .values(service_report_id=None)
        )
        db.execute(
            delete(ServiceReport)
            .where(ServiceReport.id == report_id)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.expire_all()
    logger.info("Service report deleted", extra={"report_id": report_id})


def remove_photo(db: Session, report_id: str, photo_id: str) -> None:
    photo = db.scalar(
        select(ReportPhoto)
        .where(ReportPhoto.id == photo_id)
        .where(ReportPhoto.service_report_id == report_id)
    )
    if photo is None:
        raise NotFoundException(
            code=ErrorCode.PHOTO_NOT_FOUND,
            message="Photo not found.",
        )

    try:
        db.delete(photo)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def list_draft_reports(db: Session) -> list[ServiceReport]:
    return db.scalars(
        select(ServiceReport)
        .options(joinedload(ServiceReport.customer))
        .where(ServiceReport.status == REPORT_STATUS_DRAFT)
        .order_by(ServiceReport.service_date.asc())
    ).all()


def list_reports_by_service_date(db: Session) -> list[ServiceReport]:
    return db.scalars(
        select(ServiceReport)
        .options(joinedload(ServiceReport.customer))
        .order_by(ServiceReport.service_date.asc())
    ).all()

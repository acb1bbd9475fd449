"""Business logic for customer records."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from field_service.core.domain_exceptions import DomainException, NotFoundException
from field_service.core.error_codes import ErrorCode
from field_service.db.models import Customer, ServiceReport, SmsNotification, utcnow
from field_service.schemas.customer import CustomerPayload

logger = logging.getLogger(__name__)


def list_customers(db: Session) -> list[Customer]:
    return db.scalars(select(Customer).order_by(Customer.name.asc())).all()


def get_customer(db: Session, customer_id: str) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundException(
            code=ErrorCode.CUSTOMER_NOT_FOUND,
            message="Customer not found.",
        )
    return customer


def create_customer(db: Session, payload: CustomerPayload) -> Customer:
    # A customer whose timestamps are equal has never been edited.
    now = utcnow()
    customer = Customer(**payload.model_dump(), created_at=now, updated_at=now)

    try:
        db.add(customer)
        db.commit()
        db.refresh(customer)
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Customer created", extra={"customer_id": customer.id})
    return customer


def update_customer(db: Session, customer_id: str, payload: CustomerPayload) -> Customer:
    """Replace every editable field with the submitted record."""
    customer = get_customer(db, customer_id)

    try:
        for field, value in payload.model_dump().items():
            setattr(customer, field, value)
        customer.updated_at = utcnow()

        db.commit()
        db.refresh(customer)
        return customer
    except SQLAlchemyError:
        db.rollback()
        raise


def count_reports_for_customer(db: Session, customer_id: str) -> int:
    return db.scalar(
        select(func.count(ServiceReport.id))
        .where(ServiceReport.customer_id == customer_id)
    ) or 0


def delete_customer(db: Session, customer_id: str) -> None:
    """Delete a customer unless any service report still references it."""
    customer = get_customer(db, customer_id)

    if count_reports_for_customer(db, customer_id) > 0:
        raise DomainException(
            code=ErrorCode.CUSTOMER_HAS_REPORTS,
            message=(
                "This customer has associated service reports. "
                "Please delete or reassign the reports first."
            ),
            status_code=409,
        )

    try:
        db.delete(customer)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Customer deleted", extra={"customer_id": customer_id})


def list_sms_history(db: Session, customer_id: str) -> list[SmsNotification]:
    get_customer(db, customer_id)
    return db.scalars(
        select(SmsNotification)
        .where(SmsNotification.customer_id == customer_id)
        .order_by(SmsNotification.created_at.desc())
    ).all()

"""SMS reminders and custom messages, with a log row per provider attempt.

A send that reaches Twilio is always logged, as `sent` or `failed` depending
on the provider verdict. A send that never reaches Twilio is not logged and
surfaces as SMS_SEND_FAILED.
"""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from field_service.core.config import BUSINESS_NAME
from field_service.core.domain_exceptions import DomainException
from field_service.core.error_codes import ErrorCode
from field_service.db.models import (
    SMS_STATUS_FAILED,
    SMS_STATUS_SENT,
    SmsNotification,
    utcnow,
)
from field_service.services.customer_service import get_customer
from field_service.services.report_service import get_report
from field_service.services.twilio_client import SmsProviderError, send_sms

logger = logging.getLogger(__name__)


def build_service_due_message(customer_name: str, next_service_date: date) -> str:
    return (
        f"Hi {customer_name}, this is {BUSINESS_NAME}. "
        f"Your equipment service is due on {next_service_date.strftime('%d/%m/%Y')}. "
        "Please contact us to schedule your appointment. Thank you!"
    )


def _dispatch_and_log(
    db: Session,
    customer_id: str,
    phone_number: str,
    message: str,
    service_report_id: str | None = None,
) -> SmsNotification:
    try:
        result = send_sms(to=phone_number, body=message)
    except SmsProviderError as exc:
        logger.error("SMS sending error for customer %s: %s", customer_id, exc)
        raise DomainException(
            code=ErrorCode.SMS_SEND_FAILED,
            message=str(exc) or "Failed to send SMS",
            status_code=502,
        ) from exc

    notification = SmsNotification(
        customer_id=customer_id,
        service_report_id=service_report_id,
        phone_number=phone_number,
        message=message,
        status=SMS_STATUS_SENT if result.success else SMS_STATUS_FAILED,
        sent_at=utcnow(),
    )
    try:
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "SMS %s for customer %s",
        notification.status,
        customer_id,
        extra={"notification_id": notification.id, "sid": result.sid},
    )
    return notification


def send_service_due_notification(
    db: Session,
    customer_id: str,
    phone_number: str,
    customer_name: str,
    next_service_date: date,
    service_report_id: str | None = None,
) -> SmsNotification:
    message = build_service_due_message(customer_name, next_service_date)
    return _dispatch_and_log(
        db=db,
        customer_id=customer_id,
        phone_number=phone_number,
        message=message,
        service_report_id=service_report_id,
    )


def send_custom_sms(db: Session, customer_id: str, phone_number: str, message: str) -> SmsNotification:
    return _dispatch_and_log(
        db=db,
        customer_id=customer_id,
        phone_number=phone_number,
        message=message,
    )


def send_report_reminder(db: Session, report_id: str) -> SmsNotification:
    """Send the service-due reminder for a report's next service date."""
    report = get_report(db, report_id)
    customer = report.customer

    if not customer.phone:
        raise DomainException(
            code=ErrorCode.MISSING_PHONE,
            message="Customer phone number not available",
        )
    if report.next_service_date is None:
        raise DomainException(
            code=ErrorCode.MISSING_NEXT_SERVICE_DATE,
            message="Next service date not set for this report",
        )

    return send_service_due_notification(
        db=db,
        customer_id=customer.id,
        phone_number=customer.phone,
        customer_name=customer.name,
        next_service_date=report.next_service_date,
        service_report_id=report.id,
    )


def send_customer_sms(db: Session, customer_id: str, message: str) -> SmsNotification:
    customer = get_customer(db, customer_id)
    phone_number = customer.mobile_phone or customer.phone
    if not phone_number:
        raise DomainException(
            code=ErrorCode.MISSING_PHONE,
            message="Customer phone number not available",
        )
    return send_custom_sms(db, customer.id, phone_number, message)

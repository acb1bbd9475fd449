"""Render a service report and email it to the operator mailbox.

One invocation sends at most one email and flips at most one status. The
status flip happens only after the provider accepted the email, and a failure
to flip is logged without turning the send into a failure.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from field_service.core.config import BUSINESS_NAME, REPORT_EMAIL_TO
from field_service.core.domain_exceptions import NotFoundException
from field_service.db.models import ServiceReport
from field_service.services.email_client import EmailSendError, send_html_email
from field_service.services.report_service import get_report, mark_sent_report_completed

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def format_au_date(value: date | None) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


_templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)
_templates.filters["au_date"] = format_au_date


@dataclass(frozen=True)
class ReportEmailResult:
    success: bool
    message: str | None = None
    error: str | None = None
    email_id: str | None = None

    def as_payload(self) -> dict:
        if self.success:
            return {"success": True, "message": self.message, "emailId": self.email_id}
        return {"success": False, "error": self.error}


def render_report_html(report: ServiceReport, generated_on: date | None = None) -> str:
    photos = sorted(report.photos, key=lambda photo: photo.order_index)
    return _templates.get_template("report_email.html").render(
        report=report,
        customer=report.customer,
        photos=photos,
        business_name=BUSINESS_NAME,
        generated_on=generated_on or date.today(),
    )


def build_subject(report: ServiceReport) -> str:
    return (
        f"Service Report - {report.customer.name} - {report.equipment_type} "
        f"({format_au_date(report.service_date)})"
    )


def send_report_email(db: Session, report_id: str | None) -> ReportEmailResult:
    """Email a rendered report and finalize it if it was still a draft."""
    if not report_id:
        return ReportEmailResult(success=False, error="Report ID is required")

    logger.info("Fetching report data for: %s", report_id)
    try:
        report = get_report(db, report_id)
    except NotFoundException:
        return ReportEmailResult(success=False, error="Report not found")

    if report.customer is None:
        return ReportEmailResult(success=False, error="Report customer not found")

    html = render_report_html(report)

    try:
        email_id = send_html_email(
            to=[REPORT_EMAIL_TO],
            subject=build_subject(report),
            html=html,
        )
    except EmailSendError as exc:
        logger.error("Report email for %s failed: %s", report_id, exc)
        return ReportEmailResult(success=False, error=f"Email sending failed: {exc}")

    logger.info("Report %s emailed (id=%s)", report_id, email_id)

    try:
        if mark_sent_report_completed(db, report):
            logger.info("Report %s status updated to completed", report_id)
    except SQLAlchemyError:
        logger.exception("Error updating report status for %s", report_id)

    return ReportEmailResult(
        success=True,
        message="Report generated and sent successfully to admin",
        email_id=email_id,
    )

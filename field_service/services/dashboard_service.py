"""Queries feeding the dashboard widgets."""

from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from field_service.dashboard import (
    build_calendar_events,
    build_recent_activity,
    completion_status,
)
from field_service.db.models import Customer, ServiceReport
from field_service.schemas.dashboard import (
    ActivityItem,
    CalendarEvent,
    DraftReportItem,
    StatsResponse,
)
from field_service.services.report_service import (
    list_draft_reports,
    list_reports_by_service_date,
)

RECENT_FETCH_LIMIT = 10


def get_stats(db: Session) -> StatsResponse:
    customers = db.scalar(select(func.count()).select_from(Customer)) or 0
    reports = db.scalar(select(func.count()).select_from(ServiceReport)) or 0
    return StatsResponse(customers=int(customers), service_reports=int(reports))


def get_recent_activity(db: Session) -> list[ActivityItem]:
    reports = db.scalars(
        select(ServiceReport)
        .options(joinedload(ServiceReport.customer))
        .order_by(ServiceReport.created_at.desc())
        .limit(RECENT_FETCH_LIMIT)
    ).all()
    customers = db.scalars(
        select(Customer)
        .order_by(Customer.updated_at.desc())
        .limit(RECENT_FETCH_LIMIT)
    ).all()
    return build_recent_activity(reports, customers)


def get_draft_summary(db: Session, now: datetime | None = None) -> list[DraftReportItem]:
    return [
        DraftReportItem(
            id=report.id,
            customer_name=report.customer.name,
            equipment_type=report.equipment_type,
            equipment_model=report.equipment_model,
            service_date=report.service_date,
            completion_date=report.completion_date,
            completion_status=completion_status(report.completion_date, now),
        )
        for report in list_draft_reports(db)
    ]


def get_calendar(db: Session, start: date | None = None, end: date | None = None) -> list[CalendarEvent]:
    return build_calendar_events(list_reports_by_service_date(db), start=start, end=end)

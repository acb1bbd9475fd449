"""Calendar events derived from report dates."""

from collections.abc import Iterable
from datetime import date

from field_service.db.models import ServiceReport
from field_service.schemas.dashboard import CalendarEvent


def _in_window(day: date, start: date | None, end: date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def build_calendar_events(
    reports: Iterable[ServiceReport],
    start: date | None = None,
    end: date | None = None,
) -> list[CalendarEvent]:
    events: list[CalendarEvent] = []

    for report in reports:
        customer_name = report.customer.name if report.customer else "Unknown Customer"
        equipment = report.equipment_type
        if report.equipment_model:
            equipment = f"{equipment} ({report.equipment_model})"

        candidates = [
            ("service", report.service_date, "Service Scheduled", report.status),
            ("completion", report.completion_date, "Service Completed", report.status),
            ("next_service", report.next_service_date, "Next Service Due", None),
        ]
        for event_type, day, title, status in candidates:
            if day is None or not _in_window(day, start, end):
                continue
            suffix = "next" if event_type == "next_service" else event_type
            events.append(
                CalendarEvent(
                    id=f"{report.id}-{suffix}",
                    report_id=report.id,
                    date=day,
                    type=event_type,
                    title=title,
                    customer_name=customer_name,
                    equipment_type=equipment,
                    status=status,
                )
            )

    return events

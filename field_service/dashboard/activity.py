"""Recent-activity feed merging report and customer changes."""

from collections.abc import Iterable
from typing import Final

from field_service.db.models import REPORT_STATUS_DRAFT, Customer, ServiceReport, as_utc
from field_service.schemas.dashboard import ActivityItem

FEED_SIZE: Final[int] = 5


def _report_activity(report: ServiceReport) -> ActivityItem:
    drafted = report.status == REPORT_STATUS_DRAFT
    equipment = report.equipment_type
    if report.equipment_model:
        equipment = f"{equipment} ({report.equipment_model})"
    customer_name = report.customer.name if report.customer else None

    return ActivityItem(
        id=report.id,
        type="service_report",
        action="drafted" if drafted else "created",
        title=f"Service Report {'Drafted' if drafted else 'Created'}",
        description=f"{equipment} for {customer_name}",
        timestamp=as_utc(report.created_at),
        status=report.status,
    )


def _customer_activity(customer: Customer) -> ActivityItem:
    is_new = as_utc(customer.created_at) == as_utc(customer.updated_at)
    return ActivityItem(
        id=customer.id,
        type="customer",
        action="created" if is_new else "updated",
        title=f"Customer {'Added' if is_new else 'Updated'}",
        description=customer.name,
        timestamp=as_utc(customer.updated_at),
    )


def build_recent_activity(
    reports: Iterable[ServiceReport],
    customers: Iterable[Customer],
    limit: int = FEED_SIZE,
) -> list[ActivityItem]:
    """Merge report and customer activity, newest first, truncated to `limit`."""
    items = [_report_activity(report) for report in reports]
    items.extend(_customer_activity(customer) for customer in customers)
    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit]

"""Read-side display rules for the dashboard."""

from field_service.dashboard.activity import build_recent_activity
from field_service.dashboard.calendar_events import build_calendar_events
from field_service.dashboard.completion import completion_status, days_until_completion

__all__ = [
    "build_calendar_events",
    "build_recent_activity",
    "completion_status",
    "days_until_completion",
]

"""Deadline labels for draft reports."""

import math
from datetime import date, datetime, time, timezone
from typing import Final

from field_service.schemas.dashboard import CompletionStatus

SECONDS_PER_DAY: Final[int] = 60 * 60 * 24
SOON_WINDOW_DAYS: Final[int] = 3


def days_until_completion(completion_date: date, now: datetime | None = None) -> int:
    """Ceiling of the days between now and midnight UTC of the completion date."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    deadline = datetime.combine(completion_date, time.min, tzinfo=timezone.utc)
    return math.ceil((deadline - now).total_seconds() / SECONDS_PER_DAY)


def completion_status(completion_date: date | None, now: datetime | None = None) -> CompletionStatus:
    if completion_date is None:
        return CompletionStatus(days=None, label="No deadline", severity="secondary")

    days = days_until_completion(completion_date, now)
    if days < 0:
        return CompletionStatus(days=days, label=f"{abs(days)} days overdue", severity="destructive")
    if days == 0:
        return CompletionStatus(days=0, label="Due today", severity="destructive")
    if days <= SOON_WINDOW_DAYS:
        return CompletionStatus(days=days, label=f"{days} days left", severity="outline")
    return CompletionStatus(days=days, label=f"{days} days left", severity="secondary")

"""Dashboard read-side routes."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from field_service.db.session import get_db
from field_service.routes.dependencies import get_session_context
from field_service.schemas.common import APIResponse
from field_service.schemas.dashboard import (
    ActivityItem,
    CalendarEvent,
    DraftReportItem,
    StatsResponse,
)
from field_service.services import dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_session_context)],
)


@router.get("/stats", response_model=APIResponse[StatsResponse])
def stats(db: Session = Depends(get_db)):
    return APIResponse(success=True, data=dashboard_service.get_stats(db))


@router.get("/drafts", response_model=APIResponse[List[DraftReportItem]])
def draft_reports(db: Session = Depends(get_db)):
    return APIResponse(success=True, data=dashboard_service.get_draft_summary(db))


@router.get("/recent-activity", response_model=APIResponse[List[ActivityItem]])
def recent_activity(db: Session = Depends(get_db)):
    return APIResponse(success=True, data=dashboard_service.get_recent_activity(db))


@router.get("/calendar", response_model=APIResponse[List[CalendarEvent]])
def calendar(
    start: date | None = Query(default=None, description="First day, YYYY-MM-DD"),
    end: date | None = Query(default=None, description="Last day, YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return APIResponse(
        success=True,
        data=dashboard_service.get_calendar(db, start=start, end=end),
    )

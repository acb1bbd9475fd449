from datetime import date, datetime

from pydantic import BaseModel


class StatsResponse(BaseModel):
    customers: int
    service_reports: int


class CompletionStatus(BaseModel):
    days: int | None
    label: str
    severity: str


class DraftReportItem(BaseModel):
    id: str
    customer_name: str
    equipment_type: str
    equipment_model: str | None = None
    service_date: date
    completion_date: date | None = None
    completion_status: CompletionStatus


class ActivityItem(BaseModel):
    id: str
    type: str
    action: str
    title: str
    description: str
    timestamp: datetime
    status: str | None = None


class CalendarEvent(BaseModel):
    id: str
    report_id: str
    date: date
    type: str
    title: str
    customer_name: str
    equipment_type: str
    status: str | None = None

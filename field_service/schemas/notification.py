from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CustomSmsRequest(BaseModel):
    message: str = Field(min_length=1, max_length=1600)


class SmsNotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    service_report_id: str | None = None
    phone_number: str
    message: str
    status: str
    sent_at: datetime | None = None
    created_at: datetime


class SendReportRequest(BaseModel):
    """Body of the report email callable. Kept loose so a missing id is
    reported by the callable itself rather than by request validation."""

    reportId: str | None = None


class SendSmsRequest(BaseModel):
    to: str | None = None
    message: str | None = None

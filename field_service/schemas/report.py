from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from field_service.schemas.customer import CustomerOut, CustomerSummary

_OPTIONAL_TEXT_FIELDS = (
    "equipment_model",
    "equipment_serial",
    "findings",
    "recommendations",
)


class ServiceReportPayload(BaseModel):
    """Editable fields of a service report. Status is never client-supplied."""

    customer_id: str = Field(min_length=1)
    equipment_type: str = Field(min_length=1, max_length=255)
    equipment_model: str | None = None
    equipment_serial: str | None = None
    service_description: str = Field(min_length=1)
    findings: str | None = None
    recommendations: str | None = None
    technician_name: str = Field(min_length=1, max_length=255)
    service_date: date
    completion_date: date | None = None
    next_service_date: date | None = None

    @field_validator("customer_id", "equipment_type", "service_description", "technician_name")
    @classmethod
    def _required_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value

    @field_validator(*_OPTIONAL_TEXT_FIELDS)
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("completion_date", "next_service_date", mode="before")
    @classmethod
    def _empty_date_to_none(cls, value):
        if value == "":
            return None
        return value


class ServiceReportCreate(ServiceReportPayload):
    photo_urls: list[str] = Field(default_factory=list)


class PhotoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    photo_url: str
    order_index: int
    caption: str | None = None
    created_at: datetime


class ServiceReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    equipment_type: str
    equipment_model: str | None = None
    equipment_serial: str | None = None
    service_description: str
    findings: str | None = None
    recommendations: str | None = None
    technician_name: str
    service_date: date
    completion_date: date | None = None
    next_service_date: date | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class ServiceReportListItem(ServiceReportOut):
    customer: CustomerSummary


class ServiceReportDetail(ServiceReportOut):
    customer: CustomerOut
    photos: list[PhotoOut] = Field(default_factory=list)


class ReportStatusResponse(BaseModel):
    report_id: str
    status: str


class UploadResult(BaseModel):
    filename: str
    success: bool
    photo_url: str | None = None
    photo: PhotoOut | None = None
    error: str | None = None

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CustomerPayload(BaseModel):
    """Full customer record as submitted by the customer form."""

    name: str = Field(min_length=1, max_length=255)
    business_name: str | None = None
    email: str | None = None
    phone: str | None = None
    office_phone: str | None = None
    mobile_phone: str | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator(
        "business_name",
        "email",
        "phone",
        "office_phone",
        "mobile_phone",
        "address",
    )
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    business_name: str | None = None
    email: str | None = None
    phone: str | None = None
    office_phone: str | None = None
    mobile_phone: str | None = None
    address: str | None = None
    created_at: datetime
    updated_at: datetime


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str | None = None

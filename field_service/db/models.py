"""SQLAlchemy ORM models."""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from field_service.db.session import Base

REPORT_STATUS_DRAFT = "draft"
REPORT_STATUS_IN_PROGRESS = "in-progress"
REPORT_STATUS_COMPLETED = "completed"
REPORT_STATUSES = (
    REPORT_STATUS_DRAFT,
    REPORT_STATUS_IN_PROGRESS,
    REPORT_STATUS_COMPLETED,
)

SMS_STATUS_PENDING = "pending"
SMS_STATUS_SENT = "sent"
SMS_STATUS_FAILED = "failed"


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive values read back from SQLite."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Customer(Base):
    """A customer whose equipment is serviced."""

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    office_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    mobile_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    service_reports: Mapped[list["ServiceReport"]] = relationship(back_populates="customer")
    sms_notifications: Mapped[list["SmsNotification"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ServiceReport(Base):
    """One maintenance or inspection visit for a customer's equipment."""

    __tablename__ = "service_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    customer_id: Mapped[str] = mapped_column(
        ForeignKey("customers.id"),
        nullable=False,
        index=True,
    )

    equipment_type: Mapped[str] = mapped_column(String(255), nullable=False)
    equipment_model: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    equipment_serial: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    service_description: Mapped[str] = mapped_column(Text, nullable=False)
    findings: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recommendations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    technician_name: Mapped[str] = mapped_column(String(255), nullable=False)

    service_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    next_service_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=REPORT_STATUS_DRAFT,
        server_default=text("'draft'"),
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    customer: Mapped["Customer"] = relationship(back_populates="service_reports")

    # No ORM cascade: photos are removed explicitly before the report.
    photos: Mapped[list["ReportPhoto"]] = relationship(
        back_populates="report",
        order_by="ReportPhoto.order_index",
    )


class ReportPhoto(Base):
    """A photo attached to a service report."""

    __tablename__ = "service_report_photos"
    __table_args__ = (
        Index(
            "idx_service_report_photos_order",
            "service_report_id",
            "order_index",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    service_report_id: Mapped[str] = mapped_column(
        ForeignKey("service_reports.id"),
        nullable=False,
    )

    photo_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    order_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    caption: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    report: Mapped["ServiceReport"] = relationship(back_populates="photos")


class SmsNotification(Base):
    """One SMS send attempt. Rows are never updated after insert."""

    __tablename__ = "sms_notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    customer_id: Mapped[str] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_report_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("service_reports.id", ondelete="SET NULL"),
        nullable=True,
    )

    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SMS_STATUS_PENDING,
        server_default=text("'pending'"),
    )

    sent_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    customer: Mapped["Customer"] = relationship(back_populates="sms_notifications")


class User(Base):
    """A staff account allowed to use the back office."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    sessions: Mapped[list["AuthSession"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )


class AuthSession(Base):
    """A signed-in session; tokens carry its id and die with it."""

    __tablename__ = "auth_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    user: Mapped["User"] = relationship(back_populates="sessions")

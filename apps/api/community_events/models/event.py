from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from community_events.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column


class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class CalendarType(str, Enum):
    DEVOTIONAL = "devotional"
    YOUTH_CLASS = "youth_class"
    CHILDRENS_CLASS = "childrens_class"
    STUDY_CIRCLE = "study_circle"
    HOLY_DAY = "holy_day"
    COMMUNITY_GATHERING = "community_gathering"
    OTHER = "other"


class RecurrenceType(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"
    __table_args__ = (
        sa.Index("ix_events_status_start_date", "status", "start_date"),
        sa.CheckConstraint(
            "recurrence_interval IS NULL OR recurrence_interval >= 1",
            name="ck_events_recurrence_interval_positive",
        ),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    # Derived from the title; deliberately not unique.
    slug: Mapped[str] = mapped_column(String(220), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(300), nullable=False)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    calendar_type: Mapped[CalendarType] = mapped_column(
        enum_column(CalendarType, "event_calendar"),
        nullable=False,
        default=CalendarType.COMMUNITY_GATHERING,
    )
    status: Mapped[EventStatus] = mapped_column(
        enum_column(EventStatus, "event_status"),
        nullable=False,
        default=EventStatus.DRAFT,
    )

    featured_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    host_name: Mapped[str] = mapped_column(String(200), nullable=False)
    host_email: Mapped[str] = mapped_column(String(320), nullable=False)

    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurrence_type: Mapped[RecurrenceType] = mapped_column(
        enum_column(RecurrenceType, "event_recurrence"),
        nullable=False,
        default=RecurrenceType.NONE,
    )
    recurrence_interval: Mapped[int | None] = mapped_column(Integer, nullable=True)
    recurrence_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_by: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True, index=True)

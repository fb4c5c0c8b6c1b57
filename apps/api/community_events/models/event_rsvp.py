import uuid

import sqlalchemy as sa
from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from community_events.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class EventRSVP(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "event_rsvps"
    # The reconciler reads before it writes; this constraint is what actually
    # keeps one row per (event, email) under concurrent submissions.
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_event_rsvps_event_email"),)

    event_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    guest_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reminder_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reminder_sms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

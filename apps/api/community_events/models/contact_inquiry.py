from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from community_events.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ContactInquiry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "contact_inquiries"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(300), nullable=True)
    interest: Mapped[str | None] = mapped_column(String(100), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

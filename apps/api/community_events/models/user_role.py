import uuid
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from community_events.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column


class AppRole(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    AUTHOR = "author"


class UserRole(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Append-only role grant; a user's capabilities are the union over their rows."""

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    user_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False, index=True)
    role: Mapped[AppRole] = mapped_column(enum_column(AppRole, "app_role"), nullable=False)

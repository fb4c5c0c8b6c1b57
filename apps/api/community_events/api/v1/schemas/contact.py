from __future__ import annotations

from uuid import UUID

from community_events.api.v1.schemas.events import SchemaBase


class ContactForm(SchemaBase):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    interest: str = ""
    message: str = ""


class ContactOut(SchemaBase):
    inquiry_id: UUID
    title: str
    description: str
    confirmation_sent: bool

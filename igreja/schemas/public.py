"""
Pydantic schemas for the public (cross-tenant) booking flow
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
import uuid

from igreja.schemas.validators import Duration, Email, IsoDateTime, Name, Phone


class PublicBookingCreate(BaseModel):
    """Visitor booking: an existing member, or a new visitor's contact data"""
    model_config = ConfigDict(extra="forbid")

    leader_id: uuid.UUID
    member_id: Optional[uuid.UUID] = None
    visitor_name: Optional[Name] = None
    visitor_email: Optional[Email] = None
    visitor_phone: Optional[Phone] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_at: IsoDateTime
    duration: Duration = 60

    @model_validator(mode="after")
    def member_or_visitor(self):
        if self.member_id is None and not (self.visitor_name and self.visitor_email and self.visitor_phone):
            raise ValueError("Para novos visitantes, preencha nome, email e telefone.")
        return self

    @property
    def is_new_visitor(self) -> bool:
        return self.member_id is None

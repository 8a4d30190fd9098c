"""
Pydantic schemas for events and registrations
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from igreja.schemas.validators import Email, IsoDateTime, Money, Name, Phone, StringList


class EventCreate(BaseModel):
    """Event creation schema; a price is kept only for paid events"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    scheduled_at: IsoDateTime
    location: str = Field(..., min_length=1, max_length=500)
    banner: Optional[str] = None
    speakers: StringList = Field(default_factory=list)
    max_attendees: Optional[int] = Field(default=None, ge=1)
    is_public: bool = False
    requires_payment: bool = False
    price: Optional[Money] = Field(default=None, validate_default=True)

    @field_validator("price")
    @classmethod
    def price_matches_payment(cls, value: Optional[Decimal], info: ValidationInfo) -> Optional[Decimal]:
        requires_payment = info.data.get("requires_payment", False)
        if requires_payment and value is None:
            raise ValueError("Preço é obrigatório para eventos pagos")
        if not requires_payment:
            return None
        return value


class EventUpdate(BaseModel):
    """Partial event update (type shape only)"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    location: Optional[str] = None
    banner: Optional[str] = None
    speakers: Optional[List[str]] = None
    max_attendees: Optional[int] = None
    is_public: Optional[bool] = None
    requires_payment: Optional[bool] = None
    price: Optional[Decimal] = None


class EventRegistrationCreate(BaseModel):
    """Public registration form"""
    model_config = ConfigDict(extra="forbid")

    attendee_name: Name
    attendee_email: Email
    attendee_phone: Phone

"""
Event and event registration models
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
import uuid


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class Event(SQLModel, table=True):
    """Church event, optionally public and paid"""

    __tablename__ = "events"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")

    title: str = Field(max_length=255)
    description: str
    scheduled_at: datetime = Field(index=True)
    location: str = Field(max_length=500)
    banner: Optional[str] = Field(default=None, max_length=1000, description="Public URL of the banner image")
    speakers: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    max_attendees: Optional[int] = None
    current_attendees: int = Field(default=0)

    # Pricing; price is set only when requires_payment is true
    requires_payment: bool = Field(default=False)
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)

    is_public: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class EventRegistration(SQLModel, table=True):
    """Attendee registration for an event"""

    __tablename__ = "event_registrations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    event_id: uuid.UUID = Field(foreign_key="events.id", index=True)

    attendee_name: str = Field(max_length=100)
    attendee_email: str = Field(max_length=255)
    attendee_phone: str = Field(max_length=50)
    payment_status: Optional[PaymentStatus] = None

    registered_at: datetime = Field(default_factory=datetime.utcnow)

"""
Appointment model - meeting between a leader and a member
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Appointment(SQLModel, table=True):
    """Scheduled appointment"""

    __tablename__ = "appointments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")
    leader_id: uuid.UUID = Field(foreign_key="leaders.id", index=True)
    member_id: uuid.UUID = Field(foreign_key="members.id", index=True)

    title: str = Field(max_length=255)
    description: Optional[str] = None
    scheduled_at: datetime = Field(index=True)
    duration: int = Field(default=60, description="Duration in minutes")
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True)
    visit_history: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

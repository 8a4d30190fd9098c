"""
Pydantic schemas for appointments
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import uuid

from igreja.models.appointment import AppointmentStatus
from igreja.schemas.validators import Duration, IsoDateTime


class AppointmentCreate(BaseModel):
    """Appointment creation schema"""
    model_config = ConfigDict(extra="forbid")

    leader_id: uuid.UUID
    member_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_at: IsoDateTime
    duration: Duration = 60
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    visit_history: Optional[str] = None


class AppointmentUpdate(BaseModel):
    """Partial appointment update (type shape only); any status may follow any other"""
    model_config = ConfigDict(extra="forbid")

    leader_id: Optional[uuid.UUID] = None
    member_id: Optional[uuid.UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    duration: Optional[int] = None
    status: Optional[AppointmentStatus] = None
    visit_history: Optional[str] = None


class AppointmentStatusBulkUpdate(BaseModel):
    ids: List[uuid.UUID] = Field(..., min_length=1)
    status: AppointmentStatus

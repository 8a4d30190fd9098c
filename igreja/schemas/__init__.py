"""
Schemas module
"""

from igreja.schemas.appointment import AppointmentCreate, AppointmentStatusBulkUpdate, AppointmentUpdate
from igreja.schemas.auth import SignInRequest, SignUpRequest, TokenResponse
from igreja.schemas.event import EventCreate, EventRegistrationCreate, EventUpdate
from igreja.schemas.leader import LeaderCreate, LeaderUpdate, LeaderUserCreate
from igreja.schemas.member import MemberCreate, MemberUpdate
from igreja.schemas.public import PublicBookingCreate
from igreja.schemas.tenant import ChurchSettingsUpdate
from igreja.schemas.user import PasswordUpdate, UserCreate, UserSettingsUpdate, UserUpdate

__all__ = [
    "AppointmentCreate",
    "AppointmentStatusBulkUpdate",
    "AppointmentUpdate",
    "ChurchSettingsUpdate",
    "EventCreate",
    "EventRegistrationCreate",
    "EventUpdate",
    "LeaderCreate",
    "LeaderUpdate",
    "LeaderUserCreate",
    "MemberCreate",
    "MemberUpdate",
    "PasswordUpdate",
    "PublicBookingCreate",
    "SignInRequest",
    "SignUpRequest",
    "TokenResponse",
    "UserCreate",
    "UserSettingsUpdate",
    "UserUpdate",
]

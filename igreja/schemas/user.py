"""
Pydantic schemas for users (profiles) and personal settings
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional

from igreja.core.permissions import UserRole
from igreja.schemas.validators import Email, Name, Password, Phone


class UserCreate(BaseModel):
    """New login provisioned by an admin into the current tenant"""
    model_config = ConfigDict(extra="forbid")

    name: Name
    email: Email
    password: Password
    role: UserRole = UserRole.MEMBER
    phone: Optional[Phone] = None


class UserUpdate(BaseModel):
    """Partial profile update (type shape only)"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None


class UserSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    phone: Optional[str] = None


class PasswordUpdate(BaseModel):
    password: Password

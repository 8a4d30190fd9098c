"""
Pydantic schemas for members
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime

from igreja.models.member import MemberStatus
from igreja.schemas.validators import Email, IsoDateTime, Name, Phone, StringList


class MemberCreate(BaseModel):
    """Member registration schema"""
    model_config = ConfigDict(extra="forbid")

    name: Name
    email: Email
    phone: Phone
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    groups: StringList = Field(default_factory=list)
    status: MemberStatus = MemberStatus.ACTIVE
    joined_at: Optional[IsoDateTime] = None


class MemberUpdate(BaseModel):
    """Partial member update (type shape only)"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    groups: Optional[List[str]] = None
    status: Optional[MemberStatus] = None
    joined_at: Optional[datetime] = None

"""
Pydantic schemas for leaders
"""

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, List, Optional

from igreja.core.permissions import LEADER_PERMISSIONS
from igreja.models.leader import LeaderType
from igreja.schemas.validators import Email, Name, Password, Phone, StringList


def _check_permissions(values: List[str]) -> List[str]:
    unknown = [value for value in values if value not in LEADER_PERMISSIONS]
    if unknown:
        raise ValueError(f"Permissão inválida: {', '.join(unknown)}")
    return values


LeaderPermissions = Annotated[StringList, AfterValidator(_check_permissions)]


class LeaderCreate(BaseModel):
    """Leader registration schema"""
    model_config = ConfigDict(extra="forbid")

    name: Name
    email: Email
    phone: Phone
    type: LeaderType
    permissions: LeaderPermissions = Field(default_factory=list)
    is_available_for_appointments: bool = True


class LeaderUpdate(BaseModel):
    """Partial leader update; the linked identity cannot be changed here"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    type: Optional[LeaderType] = None
    permissions: Optional[LeaderPermissions] = None
    is_available_for_appointments: Optional[bool] = None


class LeaderUserCreate(BaseModel):
    """Password for a leader's new login"""
    password: Password

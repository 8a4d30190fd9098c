"""
Leader model - ministry leaders, optionally linked to an identity
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid


class LeaderType(str, Enum):
    """Ministry role of a leader"""
    PASTOR = "Pastor"
    WORSHIP = "Líder de Louvor"
    YOUTH = "Líder de Jovens"
    CHILDREN = "Líder Infantil"
    DEACON = "Diácono"
    PRESBYTER = "Presbítero"


class Leader(SQLModel, table=True):
    """Church leader"""

    __tablename__ = "leaders"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")
    user_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="auth_identities.id",
        description="Linked identity; set once by user provisioning",
    )

    name: str = Field(max_length=100)
    email: str = Field(index=True, max_length=255)
    phone: str = Field(max_length=50)
    type: LeaderType = Field(index=True)
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_available_for_appointments: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

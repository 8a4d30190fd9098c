"""
Member model - congregation roster entry
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
import uuid


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Member(SQLModel, table=True):
    """Church member"""

    __tablename__ = "members"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")

    name: str = Field(max_length=100)
    email: str = Field(index=True, max_length=255)
    phone: str = Field(max_length=50)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    groups: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Ordered group names")

    status: MemberStatus = Field(default=MemberStatus.ACTIVE, index=True)
    joined_at: datetime = Field(default_factory=datetime.utcnow)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

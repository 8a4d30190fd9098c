"""
Profile model - application user linked one-to-one with an identity
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from igreja.core.permissions import UserRole


class Profile(SQLModel, table=True):
    """User profile; role drives the advisory permission checks"""

    __tablename__ = "profiles"

    id: uuid.UUID = Field(primary_key=True, foreign_key="auth_identities.id", description="Equals the identity id")
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")

    name: str = Field(max_length=100)
    email: str = Field(index=True, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    role: UserRole = Field(default=UserRole.MEMBER, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

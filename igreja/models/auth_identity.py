"""
Authenticated identity - private to the auth service
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON
from datetime import datetime
from typing import Any, Dict, Optional
import uuid


class AuthIdentity(SQLModel, table=True):
    """Credentials and sign-up metadata of one identity"""

    __tablename__ = "auth_identities"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False)
    user_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    email_confirmed_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

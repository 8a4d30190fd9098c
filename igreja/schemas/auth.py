"""
Pydantic schemas for sign-up and sign-in
"""

from pydantic import BaseModel, Field
from typing import Optional

from igreja.schemas.validators import Email, Name, Password


class SignUpRequest(BaseModel):
    email: Email
    password: Password
    name: Name
    organization_name: Optional[str] = Field(default=None, min_length=2, max_length=255)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: Optional[str] = None

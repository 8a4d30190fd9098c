"""
Pydantic schemas for church (tenant) settings
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class ChurchSettingsUpdate(BaseModel):
    """Editable church fields; slug and logo are managed elsewhere"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

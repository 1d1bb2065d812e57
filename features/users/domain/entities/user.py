from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Dict
from uuid import UUID
from datetime import datetime


class User(BaseModel):
    """Domain Model for a User.

    ``id``, ``public_id`` and the timestamps are assigned by storage; a
    freshly built skeleton leaves them unset.
    """
    model_config = ConfigDict(from_attributes=True, extra='ignore')
    id: Optional[int] = None
    public_id: Optional[UUID] = None
    username: str
    email: str
    full_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(extra='ignore')
    username: str = ""
    email: str = ""
    full_name: str = ""

    @field_validator("username", "email", "full_name", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v


class UpdateUserRequest(BaseModel):
    """Partial update. Empty or missing fields are left untouched."""
    model_config = ConfigDict(extra='ignore')
    username: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None

    def provided_fields(self) -> Dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v}

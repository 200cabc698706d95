"""User schemas used for registration, sessions and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    address: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: EmailStr
    address: Optional[str] = None
    company_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    user: UserRead


class UserProfileUpdate(BaseModel):
    address: Optional[str] = None

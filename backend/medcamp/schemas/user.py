"""User schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from medcamp.schemas.common import APIModel


class UserCreate(APIModel):
    email: str = Field(min_length=3)
    name: Optional[str] = None
    photo: Optional[str] = None
    phone: Optional[str] = None


class UserUpdate(APIModel):
    name: Optional[str] = None
    photo: Optional[str] = None
    phone: Optional[str] = None


class UserResponse(APIModel):
    id: str
    email: str
    name: Optional[str] = None
    photo: Optional[str] = None
    phone: Optional[str] = None
    role: str = "user"
    created_at: Optional[datetime] = None
    last_log_in: Optional[datetime] = None


class UserCreateResponse(APIModel):
    inserted_id: str = Field(alias="insertedId")
    user: UserResponse


class UserUpdateResponse(APIModel):
    message: str
    user: UserResponse


class RoleResponse(APIModel):
    role: str

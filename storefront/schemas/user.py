"""
storefront/schemas/user.py - Pydantic-модели пользователя и токена.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.user import RoleEnum


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, description="Login email")
    password: str = Field(..., min_length=6, max_length=72, description="Plain password")
    full_name: Optional[str] = None


class UserUpdate(BaseModel):
    """Админское изменение пользователя: переданные поля перезаписываются, остальные не трогаются."""
    email: Optional[str] = Field(None, min_length=3)
    full_name: Optional[str] = None
    role: Optional[RoleEnum] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    role: RoleEnum
    created_at: Optional[datetime] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

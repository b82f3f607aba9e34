# backend/storefront/schemas/user_schema.py
"""
Esquemas Pydantic para el modelo User.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from storefront.core.security import MAX_PASSWORD_BYTES, password_too_long


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=100)
    shipping_address: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserCreate(UserBase):
    """Datos de registro. La contraseña solo viaja hasta el hash."""
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)
    is_admin: bool = False

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        # El límite de bcrypt es en bytes UTF-8
        if password_too_long(v):
            raise ValueError(f"La contraseña no puede ocupar más de {MAX_PASSWORD_BYTES} bytes")
        return v


class UserUpdate(BaseModel):
    """Campos de perfil editables."""
    full_name: Optional[str] = Field(None, max_length=100)
    shipping_address: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)


class UserResponse(UserBase):
    user_id: int
    is_admin: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class RegisterRequest(BaseModel):
    """Request schema for user registration."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, description="User's password (min 6 characters)")
    first_name: str = Field(..., min_length=1, max_length=100, description="User's first name")
    last_name: str = Field(..., min_length=1, max_length=100, description="User's last name")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: str) -> str:
        return _strip_required(v)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "password": "SecurePass123",
                "first_name": "Jane",
                "last_name": "Doe"
            }
        }


class LoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "password": "SecurePass123"
            }
        }


class ProfileUpdate(BaseModel):
    """Mutable profile fields. Omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""
    id: str
    email: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
    subscription_plan: str
    subscription_status: str
    subscription_expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Response for register/login."""
    token: str = Field(..., description="Bearer token, valid for 7 days")
    user: UserResponse


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str

"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator
from pydantic_core import PydanticCustomError


def _check_confirmation(password: str, confirmation: Optional[str]) -> None:
    if confirmation is not None and confirmation != password:
        raise PydanticCustomError(
            "password_confirmation",
            "The password confirmation does not match.",
            {"field": "password"},
        )


class RegisterRequest(BaseModel):
    """Register request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    password_confirmation: Optional[str] = None
    role: Literal["candidate", "recruiter"] = "candidate"

    @model_validator(mode="after")
    def passwords_match(self):
        _check_confirmation(self.password, self.password_confirmation)
        return self


class RegisterResponse(BaseModel):
    """Register response schema."""

    message: str
    access_token: str
    refresh_token: str
    token_type: str
    user: "UserResponse"


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str
    user: "UserResponse"


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    message: str
    reset_token: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=8)
    password_confirmation: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        _check_confirmation(self.password, self.password_confirmation)
        return self


class UserResponse(BaseModel):
    """User response schema."""

    id: int
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# Rebuild models to resolve forward references
RegisterResponse.model_rebuild()
LoginResponse.model_rebuild()

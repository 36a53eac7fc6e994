"""Pydantic schemas for account endpoints."""
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from core.config import get_settings

# Same set of special characters the signup form advertises
PASSWORD_SPECIAL_CHARACTERS = set('!@#$%^&*(),.?":{}|<>')


class SignupRequest(BaseModel):
    """Schema for creating an account."""

    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str
    confirm_password: str = Field(validation_alias="confirmPassword")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: str) -> str:
        """Usernames are trimmed before length checks."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        """Require a minimum length and at least one special character."""
        min_length = get_settings().min_password_length
        if len(v) < min_length:
            raise ValueError(f"Password must be at least {min_length} characters long")
        if not any(char in PASSWORD_SPECIAL_CHARACTERS for char in v):
            raise ValueError("Password must contain at least one special character")
        return v

    @model_validator(mode="after")
    def check_passwords_match(self) -> "SignupRequest":
        """Password and confirmation must be identical."""
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Schema for verifying credentials."""

    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        """
        Normalize like signup's ``EmailStr`` so the stored address matches.

        Input that is not a valid address is only trimmed; it then fails the
        credential check with the generic 401.
        """
        if not isinstance(v, str):
            return v
        try:
            return validate_email(v.strip(), check_deliverability=False).normalized
        except EmailNotValidError:
            return v.strip()


class UserResponse(BaseModel):
    """Public account information. The (user_id, email) pair identifies later requests."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    user_id: int = Field(validation_alias="id")
    username: str
    email: str


class AuthCheckResponse(BaseModel):
    """Result of a successful identity check."""

    authenticated: bool = True
    user_id: int

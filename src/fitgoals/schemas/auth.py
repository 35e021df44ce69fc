"""Pydantic schemas for signup, login and the current user.

Learn: the response models are the only way a User leaves the API, and
none of them has a password field, so a hash can never be serialized by
accident. Input strings are trimmed before length checks; the password is
checked trimmed but hashed exactly as sent.
"""

import re
import uuid

from pydantic import BaseModel, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USERNAME_MIN = 3
USERNAME_MAX = 30
PASSWORD_MIN = 8


def _check_username(value: str) -> str:
    value = value.strip()
    if len(value) < USERNAME_MIN:
        raise ValueError(
            f"Username is required and must be at least {USERNAME_MIN} characters long"
        )
    if len(value) > USERNAME_MAX:
        raise ValueError(f"Username cannot exceed {USERNAME_MAX} characters")
    return value


def _check_password(value: str) -> str:
    if len(value.strip()) < PASSWORD_MIN:
        raise ValueError(
            f"Password is required and must be at least {PASSWORD_MIN} characters long"
        )
    return value


# ─── Requests ───────────────────────────────────────────

class SignupRequest(BaseModel):
    username: str
    email: str
    password: str

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Email is required and must be a valid email address")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


# ─── Responses ──────────────────────────────────────────

class UserRead(BaseModel):
    id: uuid.UUID
    username: str
    email: str

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """Minimal projection returned with a login token."""
    id: uuid.UUID
    username: str

    model_config = {"from_attributes": True}


class SignupResponse(BaseModel):
    message: str
    user: UserRead


class LoginResponse(BaseModel):
    token: str
    user: UserSummary

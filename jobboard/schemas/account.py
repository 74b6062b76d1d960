"""Pydantic schemas for job-seeker and company accounts."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

_BUSINESS_NUMBER = re.compile(r"^\d{3}-?\d{2}-?\d{5}$")


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)


class UserCreate(BaseModel):
    email: str
    password: str
    name: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class CompanyCreate(UserCreate):
    business_number: str

    @field_validator("business_number")
    @classmethod
    def _business_number(cls, v: str) -> str:
        v = v.strip()
        if not _BUSINESS_NUMBER.match(v):
            raise ValueError("Business number must look like 123-45-67890")
        return v.replace("-", "")


class AccountRead(BaseModel):
    id: int
    email: str
    name: str | None
    user_type: str
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


class CompanyProfileRead(AccountRead):
    description: str | None = None
    business_number: str | None = None


class CompanyProfileUpdate(BaseModel):
    name: str | None = None
    description: str | None = None

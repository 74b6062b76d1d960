"""Pydantic schemas for JWT tokens."""

from __future__ import annotations

from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str = "access"  # access | access_company


class LogoutResponse(BaseModel):
    message: str

"""Pydantic request/response schemas for the auth API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ..profiles.schemas import ProfileOut


class SignUpIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    username: str
    display_name: str


class SignInIn(BaseModel):
    identifier: str = Field(..., description="Email address or username")
    password: str


class PasswordChangeIn(BaseModel):
    new_password: str
    confirm_password: str


class SessionOut(BaseModel):
    authenticated: bool
    loading: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[ProfileOut] = None


class SignUpOut(BaseModel):
    user_id: str
    email: Optional[str] = None
    confirmation_required: bool

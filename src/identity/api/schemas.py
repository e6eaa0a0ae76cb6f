"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterUserRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    name: str | None = Field(default=None, max_length=100)
    photo_url: str | None = Field(default=None, max_length=500)


class RegisterUserResponse(BaseModel):
    user_id: str
    created: bool


class UserResponse(BaseModel):
    user_id: str
    email: str
    name: str | None = None
    photo_url: str | None = None
    registered_at: datetime | None = None

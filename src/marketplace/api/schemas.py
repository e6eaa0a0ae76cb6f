"""Pydantic request/response schemas for the Marketplace API.

These are separate from the domain objects (anti-corruption pattern).
Bodies are type-checked here; business rules are enforced again by the
workflow and the Crop aggregate.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class ListCropRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    quantity: float = Field(ge=0)
    owner_name: str = Field(min_length=1, max_length=100)
    owner_email: str = Field(min_length=3, max_length=254)
    image: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=200)
    price_per_unit: float | None = Field(default=None, ge=0)


class UpdateCropRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    image: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=200)
    price_per_unit: float | None = Field(default=None, ge=0)
    quantity: float | None = Field(default=None, ge=0)


class SubmitInterestRequest(BaseModel):
    user_email: str
    quantity: float
    user_name: str | None = None
    message: str | None = None


class DecideInterestRequest(BaseModel):
    status: Literal["accepted", "rejected"]


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CropIdResponse(BaseModel):
    crop_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CropResponse(BaseModel):
    crop_id: str
    name: str
    quantity: float
    image: str | None = None
    location: str | None = None
    price_per_unit: float | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_crop(cls, crop) -> CropResponse:
        return cls(
            crop_id=str(crop.id),
            name=crop.name,
            quantity=crop.quantity,
            image=crop.image,
            location=crop.location,
            price_per_unit=crop.price_per_unit,
            owner_name=crop.owner.owner_name if crop.owner else None,
            owner_email=crop.owner.owner_email if crop.owner else None,
            status=crop.status,
            created_at=crop.created_at,
            updated_at=crop.updated_at,
        )


class InterestIdResponse(BaseModel):
    interest_id: str
    status: str


class InterestResponse(BaseModel):
    interest_id: str
    user_email: str
    user_name: str | None = None
    quantity: float
    message: str | None = None
    status: str
    submitted_at: datetime | None = None
    decided_at: datetime | None = None
    crop_id: str
    crop_name: str
    image: str | None = None
    location: str | None = None
    price_per_unit: float | None = None
    owner_name: str | None = None
    owner_email: str | None = None

"""
Cat read/write shapes.

The owner relation has two distinct shapes: reads embed an `OwnerSummary`
built from the joined user row, writes carry a bare `OwnerRef` (user id).
"""

from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

OwnerRef = Annotated[int, Field(gt=0)]
Latitude = Annotated[float, Field(ge=-90.0, le=90.0, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180.0, le=180.0, allow_inf_nan=False)]


class OwnerSummary(BaseModel):
    user_id: int
    user_name: str


class Cat(BaseModel):
    cat_id: int
    cat_name: str
    weight: float
    owner: OwnerSummary
    filename: str
    birthdate: date
    lat: float
    lng: float


class CatCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cat_name: str = Field(..., min_length=1, max_length=100)
    weight: float = Field(..., gt=0)
    owner: OwnerRef
    filename: str = Field(..., min_length=1, max_length=255)
    birthdate: date
    lat: Latitude
    lng: Longitude


class CatUpdate(BaseModel):
    """
    Partial write-shape. Only keys the caller actually sent are applied
    (`model_dump(exclude_unset=True)`).
    """

    model_config = ConfigDict(extra="forbid")

    cat_name: str | None = Field(default=None, min_length=1, max_length=100)
    weight: float | None = Field(default=None, gt=0)
    owner: OwnerRef | None = None
    filename: str | None = Field(default=None, min_length=1, max_length=255)
    birthdate: date | None = None
    lat: Latitude | None = None
    lng: Longitude | None = None


class MessageResponse(BaseModel):
    message: str
    id: int

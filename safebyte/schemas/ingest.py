"""Pydantic schemas for restaurant/menu ingestion."""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class RestaurantIn(BaseModel):
    """Restaurant block of an ingestion document. Upserted by name."""

    name: str = Field(..., min_length=1)
    cuisine: Optional[str] = None
    price_range: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class MenuItemIn(BaseModel):
    """A single menu item. Always inserted as a new dish row."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Optional[float] = None
    calories: Optional[int] = None
    allergens: list[str] = Field(default_factory=list)
    free_of: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)


class MenuPayload(BaseModel):
    """Top-level ingestion document."""

    restaurant: RestaurantIn
    menu_items: list[MenuItemIn]


class IngestResult(BaseModel):
    """Outcome of one ingestion run."""

    success: bool
    message: str
    count: int = 0
    restaurant_id: Optional[uuid.UUID] = None

"""Pydantic schemas for dish listings, the map view, and community feedback."""

from __future__ import annotations

import uuid
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DishResult(BaseModel):
    """
    A dish as rendered by every listing view.
    safetyScore is the effective score (90 when uncurated) and safetyBadge
    is derived from it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    restaurant_id: uuid.UUID
    restaurant_name: str = Field("Unknown", alias="restaurantName")
    name: str
    description: str = ""
    price: float = 0
    calories: int = 0
    allergens: list[str] = Field(default_factory=list)
    free_of: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    trending_score: float = 0
    community_safe_count: int = 0
    community_issue_count: int = 0
    safety_score: int = Field(90, alias="safetyScore")
    safety_badge: str = Field("safe", alias="safetyBadge")


class DishListResponse(BaseModel):
    """Response for trending, search and menu views."""

    dishes: list[DishResult]


class RestaurantSummary(BaseModel):
    """Entry in the restaurant picker used by the menu view."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class MapRestaurant(BaseModel):
    """A restaurant pin on the map with its safest matching dishes."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    name: str
    cuisine: Optional[str] = None
    price_range: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    safety_rating: Optional[float] = None
    top_dishes: list[DishResult] = Field(default_factory=list, alias="topDishes")


class MapResponse(BaseModel):
    """Response for GET /map."""

    center: dict[str, float]
    restaurants: list[MapRestaurant]


class FeedbackCreate(BaseModel):
    """Body for POST /dishes/{dish_id}/feedback."""

    type: Literal["safe", "issue"]


class FeedbackResponse(BaseModel):
    """Updated community tallies after a feedback submission."""

    dish_id: uuid.UUID
    community_safe_count: int
    community_issue_count: int


class SavedResponse(BaseModel):
    """Response for POST/DELETE /saved/{dish_id}."""

    dish_id: uuid.UUID
    saved: bool

"""Restaurant endpoints — menu picker, per-restaurant menu, and the map view."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.database import get_db
from safebyte.routers.deps import get_profile_store
from safebyte.routers.dishes import query_failed, resolve_allergies
from safebyte.schemas.chat import ErrorResponse
from safebyte.schemas.dish import DishListResponse, MapResponse, RestaurantSummary
from safebyte.services.dish_query import (
    DishQueryError,
    DishView,
    build_map,
    find_dishes,
    get_restaurant,
    list_restaurants,
)
from safebyte.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["restaurants"])


@router.get(
    "/restaurants",
    response_model=list[RestaurantSummary],
    responses={503: {"model": ErrorResponse}},
)
async def restaurants(db: AsyncSession = Depends(get_db)):
    """All restaurants ordered by name."""
    try:
        return await list_restaurants(db)
    except DishQueryError as exc:
        return query_failed(exc)


@router.get(
    "/restaurants/{restaurant_id}/menu",
    response_model=DishListResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def menu(
    restaurant_id: uuid.UUID,
    allergies: Optional[list[str]] = Query(default=None),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
):
    """Every safe dish at one restaurant, safest first."""
    try:
        if await get_restaurant(db, restaurant_id) is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "Restaurant not found"},
            )
        dishes = await find_dishes(
            db, DishView.menu(restaurant_id), resolve_allergies(allergies, store)
        )
    except DishQueryError as exc:
        return query_failed(exc)
    return DishListResponse(dishes=dishes)


@router.get(
    "/map",
    response_model=MapResponse,
    responses={503: {"model": ErrorResponse}},
)
async def map_view(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    allergies: Optional[list[str]] = Query(default=None),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
):
    """
    Restaurants by safety rating with their top 3 safe dishes.
    Without a lat/lng pair the map centres on the default location.
    """
    location = (lat, lng) if lat is not None and lng is not None else None
    try:
        return await build_map(db, DishView.map(location), resolve_allergies(allergies, store))
    except DishQueryError as exc:
        return query_failed(exc)

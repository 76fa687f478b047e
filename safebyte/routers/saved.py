"""Saved dishes for the authenticated user."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.database import get_db
from safebyte.routers.deps import get_current_user_id
from safebyte.schemas.dish import DishListResponse, SavedResponse
from safebyte.services.community import (
    DishNotFoundError,
    list_saved_dishes,
    save_dish,
    unsave_dish,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/saved", tags=["saved"])


@router.get("", response_model=DishListResponse)
async def saved_dishes(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> DishListResponse:
    """The caller's saved dishes."""
    try:
        dishes = await list_saved_dishes(db, user_id)
    except Exception as exc:
        logger.error("Failed to load saved dishes for %s: %s", user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load saved dishes",
        ) from exc
    return DishListResponse(dishes=dishes)


@router.post("/{dish_id}", response_model=SavedResponse)
async def save(
    dish_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> SavedResponse:
    """Save a dish (idempotent)."""
    try:
        await save_dish(db, user_id, dish_id)
    except DishNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dish not found",
            headers={"X-Error-Code": "DISH_NOT_FOUND"},
        )
    except Exception as exc:
        logger.error("Failed to save dish %s for %s: %s", dish_id, user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save dish",
        ) from exc
    return SavedResponse(dish_id=dish_id, saved=True)


@router.delete("/{dish_id}", response_model=SavedResponse)
async def unsave(
    dish_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> SavedResponse:
    """Remove a saved dish (idempotent)."""
    try:
        await unsave_dish(db, user_id, dish_id)
    except Exception as exc:
        logger.error("Failed to unsave dish %s for %s: %s", dish_id, user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove saved dish",
        ) from exc
    return SavedResponse(dish_id=dish_id, saved=False)

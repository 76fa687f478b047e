"""
Dish listing endpoints — trending and search views, plus community feedback.

`allergies` may be repeated in the query string. When it is omitted the
locally stored profile's allergies are applied.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.database import get_db
from safebyte.routers.deps import get_current_user_id, get_profile_store
from safebyte.schemas.chat import ErrorResponse
from safebyte.schemas.dish import DishListResponse, FeedbackCreate, FeedbackResponse
from safebyte.services.community import DishNotFoundError, submit_feedback
from safebyte.services.dish_query import DishQueryError, DishView, find_dishes
from safebyte.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dishes", tags=["dishes"])


def resolve_allergies(allergies: Optional[list[str]], store: ProfileStore) -> list[str]:
    """Explicit query allergies, else the stored profile's allergies."""
    if allergies is None:
        return store.profile.allergies
    return allergies


def query_failed(exc: DishQueryError) -> JSONResponse:
    """503 body that callers can tell apart from an empty listing."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": str(exc)},
        headers={"X-Error-Code": "QUERY_FAILED"},
    )


@router.get(
    "/trending",
    response_model=DishListResponse,
    responses={503: {"model": ErrorResponse}},
)
async def trending(
    allergies: Optional[list[str]] = Query(default=None),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
):
    """Most popular safe dishes, by trending score then community safe count."""
    try:
        dishes = await find_dishes(db, DishView.trending(), resolve_allergies(allergies, store))
    except DishQueryError as exc:
        return query_failed(exc)
    return DishListResponse(dishes=dishes)


@router.get(
    "/search",
    response_model=DishListResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def search(
    q: str = Query(default=""),
    allergies: Optional[list[str]] = Query(default=None),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
):
    """Safe dishes whose name, description or ingredients contain `q`."""
    try:
        view = DishView.search(q)
    except ValueError as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    try:
        dishes = await find_dishes(db, view, resolve_allergies(allergies, store))
    except DishQueryError as exc:
        return query_failed(exc)
    return DishListResponse(dishes=dishes)


@router.post(
    "/{dish_id}/feedback",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
)
async def feedback(
    dish_id: uuid.UUID,
    body: FeedbackCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> FeedbackResponse:
    """Mark a dish as safe or as having caused an issue."""
    try:
        return await submit_feedback(db, user_id, dish_id, body.type)
    except DishNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dish not found",
            headers={"X-Error-Code": "DISH_NOT_FOUND"},
        )
    except Exception as exc:
        logger.error("Failed to record feedback for dish %s: %s", dish_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit feedback",
        ) from exc

"""
Community actions — saved dishes and safe/issue feedback.
Feedback rows and the dish counters they bump are written in one transaction.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.models import Dish, Feedback, Restaurant, SavedItem
from safebyte.schemas.dish import DishResult, FeedbackResponse
from safebyte.services.dish_query import to_dish_result

logger = logging.getLogger(__name__)


class DishNotFoundError(LookupError):
    """Raised when a community action targets a dish that does not exist."""


async def _require_dish(db: AsyncSession, dish_id: uuid.UUID) -> Dish:
    dish = await db.get(Dish, dish_id)
    if dish is None:
        raise DishNotFoundError(str(dish_id))
    return dish


async def submit_feedback(
    db: AsyncSession,
    user_id: uuid.UUID,
    dish_id: uuid.UUID,
    feedback_type: str,
) -> FeedbackResponse:
    """
    Record a 'safe' or 'issue' report and increment the matching counter.
    The increment is a single UPDATE so concurrent submissions are all counted.
    """
    counter = Dish.community_safe_count if feedback_type == "safe" else Dish.community_issue_count
    try:
        result = await db.execute(
            update(Dish)
            .where(Dish.id == dish_id)
            .values({counter: func.coalesce(counter, 0) + 1})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise DishNotFoundError(str(dish_id))
        db.add(Feedback(user_id=user_id, dish_id=dish_id, type=feedback_type))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    tallies = await db.execute(
        select(Dish.community_safe_count, Dish.community_issue_count).where(Dish.id == dish_id)
    )
    safe_count, issue_count = tallies.one()

    logger.debug("Feedback %s recorded for dish %s", feedback_type, dish_id)
    return FeedbackResponse(
        dish_id=dish_id,
        community_safe_count=safe_count or 0,
        community_issue_count=issue_count or 0,
    )


async def save_dish(db: AsyncSession, user_id: uuid.UUID, dish_id: uuid.UUID) -> None:
    """Bookmark a dish; saving twice is a no-op."""
    await _require_dish(db, dish_id)
    existing = await db.execute(
        select(SavedItem.id).where(SavedItem.user_id == user_id, SavedItem.dish_id == dish_id)
    )
    if existing.first() is not None:
        return
    db.add(SavedItem(user_id=user_id, dish_id=dish_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.debug("Dish %s already saved for %s", dish_id, user_id)
    except Exception:
        await db.rollback()
        raise


async def unsave_dish(db: AsyncSession, user_id: uuid.UUID, dish_id: uuid.UUID) -> None:
    """Remove a bookmark; removing one that does not exist is a no-op."""
    try:
        await db.execute(
            delete(SavedItem).where(SavedItem.user_id == user_id, SavedItem.dish_id == dish_id)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise


async def list_saved_dishes(db: AsyncSession, user_id: uuid.UUID) -> list[DishResult]:
    """The user's bookmarked dishes, most recently saved first."""
    result = await db.execute(
        select(Dish, Restaurant.name)
        .join(SavedItem, SavedItem.dish_id == Dish.id)
        .join(Restaurant, Restaurant.id == Dish.restaurant_id)
        .where(SavedItem.user_id == user_id)
        .order_by(SavedItem.created_at.desc())
    )
    return [to_dish_result(dish, name) for dish, name in result.all()]

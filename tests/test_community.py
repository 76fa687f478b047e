"""Tests for saved dishes and community feedback under concurrent use."""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select

from conftest import add_dish, add_restaurant
from safebyte.database import AsyncSessionLocal
from safebyte.models import Dish, Feedback, SavedItem
from safebyte.services.community import DishNotFoundError, save_dish, submit_feedback


async def _submit(dish_id, feedback_type):
    async with AsyncSessionLocal() as session:
        return await submit_feedback(session, uuid.uuid4(), dish_id, feedback_type)


async def _save(user_id, dish_id):
    async with AsyncSessionLocal() as session:
        await save_dish(session, user_id, dish_id)


async def test_concurrent_feedback_is_all_counted(db):
    r = await add_restaurant(db, "Cafe")
    dish = await add_dish(db, r, "Toast")

    await asyncio.gather(*(_submit(dish.id, "safe") for _ in range(5)))
    latest = await _submit(dish.id, "issue")

    assert latest.community_safe_count == 5
    assert latest.community_issue_count == 1
    rows = await db.execute(select(func.count()).select_from(Feedback))
    assert rows.scalar() == 6
    counts = await db.execute(
        select(Dish.community_safe_count, Dish.community_issue_count).where(Dish.id == dish.id)
    )
    assert counts.one() == (5, 1)


async def test_feedback_for_unknown_dish_writes_nothing(db):
    with pytest.raises(DishNotFoundError):
        await _submit(uuid.uuid4(), "safe")

    rows = await db.execute(select(func.count()).select_from(Feedback))
    assert rows.scalar() == 0


async def test_concurrent_saves_keep_one_row(db):
    r = await add_restaurant(db, "Cafe")
    dish = await add_dish(db, r, "Toast")
    user_id = uuid.uuid4()

    await asyncio.gather(*(_save(user_id, dish.id) for _ in range(3)))

    rows = await db.execute(select(func.count()).select_from(SavedItem))
    assert rows.scalar() == 1

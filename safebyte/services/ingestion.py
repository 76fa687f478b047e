"""
Menu ingestion — validates an uploaded restaurant/menu document and writes it.

The restaurant is upserted by name; every menu item is inserted as a new dish
row, so re-uploading a menu adds dishes rather than replacing them.
Shared by POST /admin/ingest and scripts/ingest.py.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.models import Dish, Restaurant
from safebyte.schemas.ingest import IngestResult, MenuPayload

logger = logging.getLogger(__name__)


class IngestionError(ValueError):
    """Raised when an ingestion document is malformed."""


def parse_menu_payload(raw: Union[str, bytes, dict[str, Any]]) -> MenuPayload:
    """
    Validate an ingestion document given as JSON text or an already-decoded dict.
    Error messages are shown to the administrator verbatim.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise IngestionError("Invalid JSON format") from exc

    if not isinstance(raw, dict):
        raise IngestionError("Invalid JSON format")

    restaurant = raw.get("restaurant")
    if not isinstance(restaurant, dict) or not restaurant.get("name"):
        raise IngestionError("Restaurant name is required")
    if not isinstance(raw.get("menu_items"), list):
        raise IngestionError("menu_items must be an array")

    try:
        return MenuPayload.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise IngestionError(f"Invalid field {location}: {first['msg']}") from exc


async def upsert_restaurant(db: AsyncSession, payload: MenuPayload) -> Restaurant:
    """Insert the restaurant, or update the existing one with the same name."""
    data = payload.restaurant
    result = await db.execute(select(Restaurant).where(Restaurant.name == data.name))
    restaurant = result.scalar_one_or_none()

    if restaurant is None:
        restaurant = Restaurant(name=data.name)
        db.add(restaurant)

    restaurant.cuisine = data.cuisine
    restaurant.price_range = data.price_range
    restaurant.address = data.address
    restaurant.latitude = data.latitude
    restaurant.longitude = data.longitude
    restaurant.last_updated = date.today()

    await db.flush()
    return restaurant


async def ingest_menu(db: AsyncSession, payload: MenuPayload) -> IngestResult:
    """Write one ingestion document in a single transaction."""
    try:
        restaurant = await upsert_restaurant(db, payload)
        for item in payload.menu_items:
            db.add(
                Dish(
                    restaurant_id=restaurant.id,
                    name=item.name,
                    description=item.description or "",
                    price=item.price,
                    calories=item.calories,
                    allergens=item.allergens or [],
                    free_of=item.free_of or [],
                    ingredients=item.ingredients or [],
                )
            )
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Failed to ingest menu for %s", payload.restaurant.name)
        raise

    count = len(payload.menu_items)
    logger.info("Ingested %d dishes for %s", count, payload.restaurant.name)
    return IngestResult(
        success=True,
        message=f"Successfully ingested {count} dishes for {payload.restaurant.name}",
        count=count,
        restaurant_id=restaurant.id,
    )

"""
Dish query assembler — one query shape per view, always combined with the
user's allergen exclusion.

Flow for every view:
  1. SQL: base predicate + view ordering (scalar columns only).
  2. Python: allergen exclusion and, for search, the text match across name,
     description and ingredients (JSON arrays are not portable SQL).
  3. Python: view-specific re-ranking, per-restaurant cap, overall cap.

Nothing is cached; each call re-issues the query. Any database failure is
raised as DishQueryError so callers can tell "query failed" from "no dishes".
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from safebyte.models import Dish, Restaurant
from safebyte.schemas.dish import DishResult, MapResponse, MapRestaurant, RestaurantSummary
from safebyte.services.safety_filter import (
    effective_safety_score,
    is_safe,
    normalize_allergens,
    safety_badge,
)
from safebyte.utils.allergy_data import DEFAULT_SAFETY_SCORE

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 20
SEARCH_LIMIT = 20
MAP_DISHES_PER_RESTAURANT = 3

# Used when the caller does not share a location (San Francisco)
DEFAULT_MAP_CENTER = (37.7749, -122.4194)

ViewKind = Literal["trending", "search", "menu", "map"]


class DishQueryError(Exception):
    """Raised when the backing store cannot answer a dish query."""


@dataclass(frozen=True)
class DishView:
    """The view a dish listing is requested for."""

    kind: ViewKind
    query: Optional[str] = None
    restaurant_id: Optional[uuid.UUID] = None
    location: Optional[tuple[float, float]] = None

    @classmethod
    def trending(cls) -> "DishView":
        return cls(kind="trending")

    @classmethod
    def search(cls, text: str) -> "DishView":
        if not text or not text.strip():
            raise ValueError("Search query must not be blank")
        return cls(kind="search", query=text.strip())

    @classmethod
    def menu(cls, restaurant_id: uuid.UUID) -> "DishView":
        return cls(kind="menu", restaurant_id=restaurant_id)

    @classmethod
    def map(cls, location: Optional[tuple[float, float]] = None) -> "DishView":
        return cls(kind="map", location=location or DEFAULT_MAP_CENTER)


@dataclass
class DishQuery:
    """
    An executable dish query.
    statement selects (Dish, restaurant name) rows in the view's base order;
    matches / sort_key run over the fetched rows.
    """

    view: DishView
    statement: Select
    excluded_allergens: frozenset[str] = field(default_factory=frozenset)
    matches: Optional[Callable[[Dish], bool]] = None
    sort_key: Optional[Callable[[Dish], tuple]] = None
    limit: Optional[int] = None
    per_restaurant_limit: Optional[int] = None

    def accepts(self, dish: Dish) -> bool:
        """Base predicate AND no overlap with the excluded allergens."""
        if self.matches is not None and not self.matches(dish):
            return False
        return is_safe(dish.allergens or [], self.excluded_allergens)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _safety_order():
    """SQL expression for the effective safety score."""
    return func.coalesce(Dish.safety_score, DEFAULT_SAFETY_SCORE)


def _base_statement() -> Select:
    return select(Dish, Restaurant.name).join(
        Restaurant, Restaurant.id == Dish.restaurant_id
    )


def _field_hits(dish: Dish, needle: str) -> tuple[bool, int]:
    """(name matched, number of fields matched) for a lower-cased needle."""
    in_name = needle in (dish.name or "").lower()
    in_description = needle in (dish.description or "").lower()
    in_ingredients = any(needle in str(i).lower() for i in (dish.ingredients or []))
    return in_name, int(in_name) + int(in_description) + int(in_ingredients)


def to_dish_result(dish: Dish, restaurant_name: Optional[str]) -> DishResult:
    """Convert an ORM row into the listing shape, filling display defaults."""
    score = effective_safety_score(dish.safety_score)
    return DishResult(
        id=dish.id,
        restaurant_id=dish.restaurant_id,
        restaurant_name=restaurant_name or "Unknown",
        name=dish.name,
        description=dish.description or "",
        price=dish.price or 0,
        calories=dish.calories or 0,
        allergens=dish.allergens or [],
        free_of=dish.free_of or [],
        ingredients=dish.ingredients or [],
        trending_score=dish.trending_score or 0,
        community_safe_count=dish.community_safe_count or 0,
        community_issue_count=dish.community_issue_count or 0,
        safety_score=score,
        safety_badge=safety_badge(score),
    )


# ── Assembly ─────────────────────────────────────────────────────────────────


def assemble_dish_query(view: DishView, user_allergies: list[str]) -> DishQuery:
    """
    Build the query for a view.

    trending → trending_score desc, community_safe_count desc, first 20
    search   → text match on name | description | ingredients, name hits first,
               then more fields matched, then safety score desc, first 20
    menu     → one restaurant, safety score desc, unbounded
    map      → safety score desc, top 3 per restaurant
    An empty allergy list applies no exclusion.
    """
    excluded = frozenset(normalize_allergens(user_allergies))
    statement = _base_statement()

    if view.kind == "trending":
        return DishQuery(
            view=view,
            statement=statement.order_by(
                Dish.trending_score.desc(),
                Dish.community_safe_count.desc(),
                Dish.name,
            ),
            excluded_allergens=excluded,
            limit=TRENDING_LIMIT,
        )

    if view.kind == "search":
        needle = (view.query or "").lower()

        def _matches(dish: Dish) -> bool:
            return _field_hits(dish, needle)[1] > 0

        def _rank(dish: Dish) -> tuple:
            in_name, hits = _field_hits(dish, needle)
            return (-int(in_name), -hits, -effective_safety_score(dish.safety_score))

        return DishQuery(
            view=view,
            statement=statement.order_by(_safety_order().desc(), Dish.name),
            excluded_allergens=excluded,
            matches=_matches,
            sort_key=_rank,
            limit=SEARCH_LIMIT,
        )

    if view.kind == "menu":
        return DishQuery(
            view=view,
            statement=statement.where(Dish.restaurant_id == view.restaurant_id).order_by(
                _safety_order().desc(), Dish.name
            ),
            excluded_allergens=excluded,
        )

    if view.kind == "map":
        return DishQuery(
            view=view,
            statement=statement.order_by(_safety_order().desc(), Dish.name),
            excluded_allergens=excluded,
            per_restaurant_limit=MAP_DISHES_PER_RESTAURANT,
        )

    raise ValueError(f"Unknown dish view: {view.kind}")


# ── Execution ────────────────────────────────────────────────────────────────


async def execute_dish_query(db: AsyncSession, query: DishQuery) -> list[DishResult]:
    """Run an assembled query and return listing rows in view order."""
    try:
        result = await db.execute(query.statement)
        rows = result.all()
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Dish query failed (%s view): %s", query.view.kind, exc)
        raise DishQueryError(f"Dish query failed for the {query.view.kind} view") from exc

    accepted = [(dish, name) for dish, name in rows if query.accepts(dish)]

    if query.sort_key is not None:
        accepted.sort(key=lambda pair: query.sort_key(pair[0]))

    if query.per_restaurant_limit is not None:
        per_restaurant: dict[uuid.UUID, int] = defaultdict(int)
        capped = []
        for dish, name in accepted:
            if per_restaurant[dish.restaurant_id] < query.per_restaurant_limit:
                per_restaurant[dish.restaurant_id] += 1
                capped.append((dish, name))
        accepted = capped

    if query.limit is not None:
        accepted = accepted[: query.limit]

    return [to_dish_result(dish, name) for dish, name in accepted]


async def find_dishes(
    db: AsyncSession,
    view: DishView,
    user_allergies: list[str],
) -> list[DishResult]:
    """Assemble and execute in one step."""
    return await execute_dish_query(db, assemble_dish_query(view, user_allergies))


# ── Restaurants ──────────────────────────────────────────────────────────────


async def list_restaurants(db: AsyncSession) -> list[RestaurantSummary]:
    """All restaurants (id, name) ordered by name, for the menu picker."""
    try:
        result = await db.execute(
            select(Restaurant.id, Restaurant.name).order_by(Restaurant.name)
        )
        rows = result.all()
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Restaurant listing failed: %s", exc)
        raise DishQueryError("Restaurant query failed") from exc
    return [RestaurantSummary(id=row.id, name=row.name) for row in rows]


async def get_restaurant(db: AsyncSession, restaurant_id: uuid.UUID) -> Optional[Restaurant]:
    """Fetch a restaurant by id, or None when it does not exist."""
    try:
        return await db.get(Restaurant, restaurant_id)
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Restaurant lookup failed for %s: %s", restaurant_id, exc)
        raise DishQueryError("Restaurant query failed") from exc


async def build_map(
    db: AsyncSession,
    view: DishView,
    user_allergies: list[str],
) -> MapResponse:
    """
    Restaurants ordered by safety_rating desc, each with its top safe dishes.
    Restaurants with no matching dishes are still listed.
    """
    try:
        result = await db.execute(
            select(Restaurant).order_by(Restaurant.safety_rating.desc().nulls_last(), Restaurant.name)
        )
        restaurants = result.scalars().all()
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Map restaurant query failed: %s", exc)
        raise DishQueryError("Dish query failed for the map view") from exc

    dishes = await find_dishes(db, view, user_allergies)
    by_restaurant: dict[uuid.UUID, list[DishResult]] = defaultdict(list)
    for dish in dishes:
        by_restaurant[dish.restaurant_id].append(dish)

    lat, lng = view.location or DEFAULT_MAP_CENTER
    return MapResponse(
        center={"lat": lat, "lng": lng},
        restaurants=[
            MapRestaurant(
                id=r.id,
                name=r.name,
                cuisine=r.cuisine,
                price_range=r.price_range,
                address=r.address,
                latitude=r.latitude,
                longitude=r.longitude,
                safety_rating=r.safety_rating,
                top_dishes=by_restaurant.get(r.id, []),
            )
            for r in restaurants
        ],
    )

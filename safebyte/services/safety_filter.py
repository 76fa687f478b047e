"""
Safety filter — decides whether a dish is safe for a user's allergy set and
derives the badge shown next to its safety score.

Allergen names are compared after trimming and lower-casing both sides, so
"Peanuts " in a profile matches "peanuts" on a dish. No synonym resolution is
done: "Milk" and "dairy" are different allergens here.
"""

from __future__ import annotations

from typing import Iterable, Optional

from safebyte.utils.allergy_data import (
    DEFAULT_SAFETY_SCORE,
    FALLBACK_BADGE,
    SAFETY_BADGE_THRESHOLDS,
)


def normalize_allergen(name: str) -> str:
    """Trim and lower-case a single allergen name."""
    return name.strip().lower()


def normalize_allergens(names: Iterable[str]) -> set[str]:
    """Normalised set of allergen names, ignoring blanks."""
    normalised = {normalize_allergen(n) for n in names if n is not None}
    normalised.discard("")
    return normalised


def is_safe(dish_allergens: Iterable[str], user_allergies: Iterable[str]) -> bool:
    """
    True when the dish contains none of the user's allergens.
    An empty user allergy set never excludes anything.
    """
    user_set = normalize_allergens(user_allergies)
    if not user_set:
        return True
    return normalize_allergens(dish_allergens).isdisjoint(user_set)


def effective_safety_score(score: Optional[float]) -> int:
    """Curated score, or DEFAULT_SAFETY_SCORE when the dish has none."""
    if score is None:
        return DEFAULT_SAFETY_SCORE
    return int(score)


def safety_badge(score: float) -> str:
    """Map a 0–100 safety score to 'safe', 'caution' or 'avoid'."""
    for threshold, badge in SAFETY_BADGE_THRESHOLDS:
        if score >= threshold:
            return badge
    return FALLBACK_BADGE

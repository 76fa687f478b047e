"""
Local profile endpoints — read and mutate the ProfileStore.
Every successful mutation is persisted by the store before the response is sent.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from safebyte.routers.deps import get_profile_store
from safebyte.schemas.profile import (
    AllergyAdd,
    DietTagAdd,
    ProfileOptions,
    ProfileUpdate,
    Severity,
    UserProfile,
)
from safebyte.services.profile_store import ProfileStore
from safebyte.utils.allergy_data import (
    COMMON_ALLERGENS,
    DIETARY_PREFERENCES,
    SEVERITY_DESCRIPTIONS,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfile)
async def get_profile(store: ProfileStore = Depends(get_profile_store)) -> UserProfile:
    """Current profile."""
    return store.profile


@router.get("/options", response_model=ProfileOptions)
async def profile_options() -> ProfileOptions:
    """Allergens, diet tags and severity levels offered by the profile editor."""
    return ProfileOptions(
        allergens=COMMON_ALLERGENS,
        dietTags=DIETARY_PREFERENCES,
        severityLevels=SEVERITY_DESCRIPTIONS,
    )


@router.put("", response_model=UserProfile)
async def update_profile(
    body: ProfileUpdate,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    """Replace the supplied fields; omitted fields keep their values."""
    return store.update(body)


@router.delete("", response_model=UserProfile)
async def reset_profile(store: ProfileStore = Depends(get_profile_store)) -> UserProfile:
    """Reset to the empty default profile."""
    logger.info("Profile reset")
    return store.reset()


@router.post("/allergies", response_model=UserProfile)
async def add_allergy(
    body: AllergyAdd,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    return store.add_allergy(body.allergy, body.severity)


@router.put("/allergies/{allergy}/severity/{severity}", response_model=UserProfile)
async def set_severity(
    allergy: str,
    severity: Severity,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    try:
        return store.set_severity(allergy, severity)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Allergy not in profile: {allergy}",
        )


@router.delete("/allergies/{allergy}", response_model=UserProfile)
async def remove_allergy(
    allergy: str,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    return store.remove_allergy(allergy)


@router.post("/diet-tags", response_model=UserProfile)
async def add_diet_tag(
    body: DietTagAdd,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    return store.add_diet_tag(body.tag)


@router.delete("/diet-tags/{tag}", response_model=UserProfile)
async def remove_diet_tag(
    tag: str,
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    return store.remove_diet_tag(tag)

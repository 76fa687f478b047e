"""
Remote profile endpoints.

/profiles/{uid}       — service-to-service read / full replace, X-Service-Token
/profile/sync         — push the local profile to the caller's remote record
/profile/pull         — replace the local profile with the caller's remote record
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.database import get_db
from safebyte.routers.deps import get_current_user_id, get_profile_store, verify_service_token
from safebyte.schemas.profile import (
    ProfileUpdate,
    RemoteProfileRead,
    RemoteProfileWrite,
    UserProfile,
)
from safebyte.services.profile_mirror import (
    get_remote_profile,
    mirror_payload,
    to_local_profile,
    upsert_remote_profile,
)
from safebyte.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profiles"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Profile not found",
        headers={"X-Error-Code": "USER_NOT_FOUND"},
    )


@router.get("/profiles/{uid}", response_model=RemoteProfileRead)
async def read_profile(
    uid: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: None = Depends(verify_service_token),
) -> RemoteProfileRead:
    """Return the remote profile record."""
    record = await get_remote_profile(db, uid)
    if record is None:
        raise _not_found()
    return RemoteProfileRead.model_validate(record)


@router.put("/profiles/{uid}", response_model=RemoteProfileRead)
async def write_profile(
    uid: uuid.UUID,
    body: RemoteProfileWrite,
    db: AsyncSession = Depends(get_db),
    _: None = Depends(verify_service_token),
):
    """FULL REPLACE of the remote profile; creates it on first write (201)."""
    try:
        record, created = await upsert_remote_profile(db, uid, body)
    except Exception as exc:
        logger.error("Failed to upsert profile %s: %s", uid, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save profile",
        ) from exc

    payload = RemoteProfileRead.model_validate(record)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=payload.model_dump(mode="json", by_alias=True),
    )


@router.post("/profile/sync", response_model=RemoteProfileRead)
async def sync_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
) -> RemoteProfileRead:
    """Mirror the local profile to the authenticated user's remote record."""
    try:
        record, _ = await upsert_remote_profile(
            db, user_id, mirror_payload(store.profile, x_user_email)
        )
    except Exception as exc:
        logger.error("Failed to sync profile for %s: %s", user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save profile",
        ) from exc
    return RemoteProfileRead.model_validate(record)


@router.post("/profile/pull", response_model=UserProfile)
async def pull_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    store: ProfileStore = Depends(get_profile_store),
) -> UserProfile:
    """Overwrite the local allergies, diet tags and notes with the remote record."""
    record = await get_remote_profile(db, user_id)
    if record is None:
        raise _not_found()
    remote = to_local_profile(record)
    return store.update(
        ProfileUpdate(
            allergies=remote.allergies,
            severity_levels=remote.severity_levels,
            diet_tags=remote.diet_tags,
            notes=remote.notes,
        )
    )

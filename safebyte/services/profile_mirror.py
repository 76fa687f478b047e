"""Remote profile mirror — upserts the dietary profile into the `profiles` table."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.models import Profile
from safebyte.schemas.profile import RemoteProfileWrite, UserProfile

logger = logging.getLogger(__name__)


async def get_remote_profile(db: AsyncSession, uid: uuid.UUID) -> Optional[Profile]:
    return await db.get(Profile, uid)


async def upsert_remote_profile(
    db: AsyncSession,
    uid: uuid.UUID,
    data: RemoteProfileWrite,
) -> tuple[Profile, bool]:
    """
    Full replace of the remote record for `uid`.
    Returns (record, created).
    """
    record = await db.get(Profile, uid)
    created = record is None
    if created:
        record = Profile(id=uid)
        db.add(record)

    record.email = data.email if data.email is not None else record.email
    record.allergies = list(data.allergies)
    record.severity_levels = {
        k: v for k, v in data.severity_levels.items() if k in data.allergies
    }
    record.diet_tags = list(data.diet_tags)
    record.notes = data.notes

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(record)

    logger.debug("Remote profile %s %s", uid, "created" if created else "updated")
    return record, created


def mirror_payload(profile: UserProfile, email: Optional[str] = None) -> RemoteProfileWrite:
    """Project a local profile onto the remote record shape."""
    return RemoteProfileWrite(
        email=email,
        allergies=profile.allergies,
        severity_levels=profile.severity_levels,
        diet_tags=profile.diet_tags,
        notes=profile.notes,
    )


def to_local_profile(record: Profile) -> UserProfile:
    """Rebuild a local profile from the remote record (used when pulling on login)."""
    return UserProfile(
        allergies=record.allergies or [],
        severity_levels=record.severity_levels or {},
        diet_tags=record.diet_tags or [],
        notes=record.notes or "",
    )

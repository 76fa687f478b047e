"""Shared router dependencies: caller identity, service token, profile store."""

from __future__ import annotations

import uuid

from fastapi import Header, HTTPException, Request, status

from safebyte.config import settings
from safebyte.services.profile_store import ProfileStore


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-ID"),
) -> uuid.UUID:
    """
    Parse the authenticated user's id from the X-User-ID header.
    Session verification is the auth provider's job; this service trusts the header.
    """
    try:
        return uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format — must be a UUID",
            headers={"X-Error-Code": "MISSING_USER_ID"},
        )


async def verify_service_token(
    x_service_token: str = Header(..., alias="X-Service-Token"),
) -> None:
    """Verify that the inter-service token matches the configured secret."""
    if x_service_token != settings.service_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid service token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_profile_store(request: Request) -> ProfileStore:
    """The process-wide ProfileStore created during application startup."""
    return request.app.state.profile_store

"""Admin ingestion endpoint — protected by the X-Service-Token header."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from safebyte.database import get_db
from safebyte.routers.deps import verify_service_token
from safebyte.schemas.ingest import IngestResult
from safebyte.services.ingestion import IngestionError, ingest_menu, parse_menu_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/ingest", response_model=IngestResult, status_code=status.HTTP_201_CREATED)
async def ingest(
    request: Request,
    db: AsyncSession = Depends(get_db),
    _: None = Depends(verify_service_token),
):
    """
    Upload one restaurant/menu JSON document.
    The body is read raw so malformed JSON gets the same message as the CLI.
    """
    raw = await request.body()
    try:
        payload = parse_menu_payload(raw)
    except IngestionError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=IngestResult(success=False, message=str(exc)).model_dump(mode="json"),
        )

    try:
        return await ingest_menu(db, payload)
    except Exception as exc:
        logger.error("Ingestion failed for %s: %s", payload.restaurant.name, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=IngestResult(success=False, message="Failed to ingest menu").model_dump(mode="json"),
        )

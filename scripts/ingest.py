"""
ingest.py — restaurant/menu JSON ingestion script.

Each file holds one document:
    {"restaurant": {"name", "cuisine", "price_range", "address"?, "latitude"?, "longitude"?},
     "menu_items": [{"name", "description"?, "price", "calories"?,
                     "allergens": [], "free_of": [], "ingredients": []}]}

Usage:
    python scripts/ingest.py --json menus/luigis.json               # ingest one file
    python scripts/ingest.py --json menus/a.json menus/b.json       # several files
    python scripts/ingest.py --json menus/luigis.json --dry-run     # validate, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from safebyte.database import AsyncSessionLocal, engine
from safebyte.models import Base  # noqa: F401
from safebyte.services.ingestion import IngestionError, ingest_menu, parse_menu_payload

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def run_ingest(paths: list[str], dry_run: bool = False) -> int:
    """Ingest every file; returns the number of files that failed."""
    failed = 0

    if not dry_run:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    for path in paths:
        try:
            payload = parse_menu_payload(Path(path).read_bytes())
        except (OSError, IngestionError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            failed += 1
            continue

        if dry_run:
            logger.info(
                "%s: OK (%s, %d menu items)",
                path, payload.restaurant.name, len(payload.menu_items),
            )
            continue

        try:
            async with AsyncSessionLocal() as session:
                result = await ingest_menu(session, payload)
            logger.info("%s: %s", path, result.message)
        except Exception as exc:
            logger.warning("Error ingesting %s: %s", path, exc)
            failed += 1

    logger.info("Ingestion complete. Files: %d, Failed: %d", len(paths), failed)
    await engine.dispose()
    return failed


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Ingest restaurant/menu JSON into the SafeByte database.")
    parser.add_argument("--json", required=True, nargs="+", help="Path(s) to menu JSON documents")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, no DB writes")
    args = parser.parse_args()

    failed = asyncio.run(run_ingest(args.json, dry_run=args.dry_run))
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()

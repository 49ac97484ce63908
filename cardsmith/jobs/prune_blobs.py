"""
Remove stored images that no card references.

Orphans are left behind when a blob write succeeds but the card write
after it fails and the cleanup also fails, or when a blob delete fails
during card deletion. Can be run as a standalone script or from a scheduler.

A blob is stored before the card that points at it is committed, so an
unreferenced blob may belong to a request still in flight. Only blobs
older than the grace period (``settings.prune_min_age_seconds``) are
treated as orphans.
"""

import argparse
import asyncio
import logging
import time

from cardsmith.config import settings
from cardsmith.db.database import async_session_factory
from cardsmith.db.operations import list_image_keys
from cardsmith.main import configure_logging
from cardsmith.storage.blobs import create_blob_store, key_created_at

logger = logging.getLogger(__name__)


def is_old_enough(key: str, min_age_seconds: float, now: float) -> bool:
    """Whether a key's time prefix lies at least min_age_seconds in the past."""
    created_at = key_created_at(key)
    if created_at is None:
        return False
    return now - created_at >= min_age_seconds


async def run_prune(dry_run: bool = False, min_age_seconds: float | None = None) -> list[str]:
    """
    Delete every blob older than the grace period whose key no card uses.

    Args:
        dry_run: Only report orphaned keys, do not delete them
        min_age_seconds: Grace period, defaults to settings.prune_min_age_seconds

    Returns:
        The orphaned keys found (and deleted unless dry_run)
    """
    if min_age_seconds is None:
        min_age_seconds = settings.prune_min_age_seconds

    async with async_session_factory() as session:
        blobs = create_blob_store(session)
        now = time.time()
        referenced = await list_image_keys(session)
        unreferenced = [key for key in await blobs.list_keys() if key not in referenced]
        orphans = [key for key in unreferenced if is_old_enough(key, min_age_seconds, now)]

        logger.info(
            "Found %d orphaned blobs (%d unreferenced, %d too recent)",
            len(orphans),
            len(unreferenced),
            len(unreferenced) - len(orphans),
        )

        if dry_run:
            for key in orphans:
                logger.info("Would delete %s", key)
            return orphans

        for key in orphans:
            await blobs.delete(key)
        await session.commit()

    logger.info("Pruned %d blobs", len(orphans))
    return orphans


def main() -> None:
    """CLI entry point for pruning orphaned blobs."""
    parser = argparse.ArgumentParser(description="Delete stored images no card references.")
    parser.add_argument("--dry-run", action="store_true", help="List orphans without deleting")
    parser.add_argument(
        "--min-age",
        type=float,
        default=None,
        help="Keep unreferenced blobs younger than this many seconds",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run_prune(dry_run=args.dry_run, min_age_seconds=args.min_age))


if __name__ == "__main__":
    main()

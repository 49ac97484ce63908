"""
Card service.

Orchestrates card CRUD across the document store and the blob store.

Image writes and record writes are not one transaction. The service keeps
them consistent on a best-effort basis:

- create/update store the image first; if the record write then fails,
  the freshly stored blob is deleted again
- update with a new image deletes the previous blob once the record
  points at the new one
- delete removes the blob before the record; a failed blob delete is
  logged and does not block the record delete
"""

import logging
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cardsmith.config import MAX_STAT_VALUE, settings
from cardsmith.db import operations
from cardsmith.db.database import get_session
from cardsmith.models.card import STAT_FIELDS, CardFields, ImageUpload
from cardsmith.models.db import CardDB
from cardsmith.models.failure import (
    FailureKind,
    InvalidInputError,
    NotFoundError,
    UploadTooLargeError,
)
from cardsmith.storage.blobs import BlobStore, get_blob_store

logger = logging.getLogger(__name__)


class CardService:
    """CRUD for cards, including their uploaded images."""

    def __init__(
        self,
        session: AsyncSession,
        blobs: BlobStore,
        max_upload_bytes: int | None = None,
    ):
        self.session = session
        self.blobs = blobs
        self.max_upload_bytes = (
            settings.max_upload_bytes if max_upload_bytes is None else max_upload_bytes
        )

    # --- helpers ---

    async def _resolve_design(self, reference: str) -> int | None:
        """
        Turn a client design reference into a design id.

        Accepts a design id or a design name. An empty reference means
        "no design".
        """
        reference = reference.strip()
        if not reference:
            return None

        # isdigit() also accepts superscripts and other non-ASCII digits
        if reference.isascii() and reference.isdecimal():
            design = await operations.get_design(self.session, int(reference))
            if design is not None:
                return design.id

        design = await operations.get_design_by_name(self.session, reference)
        if design is None:
            raise InvalidInputError(f"Card design '{reference}' not found")
        return design.id

    def _validate_values(self, values: dict[str, Any]) -> None:
        if "name" in values:
            values["name"] = values["name"].strip()
            if not values["name"]:
                raise InvalidInputError(
                    "Card name cannot be empty", kind=FailureKind.MISSING_REQUIRED
                )

        for stat in STAT_FIELDS:
            value = values.get(stat)
            if value is not None and not 0 <= value <= MAX_STAT_VALUE:
                raise InvalidInputError(f"'{stat}' must be between 0 and {MAX_STAT_VALUE}")

    async def _store_image(self, image: ImageUpload) -> str:
        if not image.content_type.startswith("image/"):
            raise InvalidInputError(
                "Uploaded file must be an image",
                detail=f"Got content type '{image.content_type}'",
            )
        if not image.data:
            raise InvalidInputError("Uploaded image is empty")
        if len(image.data) > self.max_upload_bytes:
            raise UploadTooLargeError(len(image.data), self.max_upload_bytes)

        return await self.blobs.put(image.data, image.filename, image.content_type)

    async def _discard_blob(self, key: str) -> None:
        """Delete a blob, logging instead of raising on failure."""
        try:
            await self.blobs.delete(key)
        except Exception as e:
            logger.warning("Could not delete blob %s: %s", key, e)

    # --- operations ---

    async def create(self, fields: CardFields, image: ImageUpload | None = None) -> CardDB:
        """
        Create a card, storing its image first when one is given.

        Raises InvalidInputError for a missing name, out-of-range stats,
        an unknown design or a non-image upload.
        """
        if fields.name is None:
            raise InvalidInputError("Card name is required", kind=FailureKind.MISSING_REQUIRED)

        values = fields.provided()
        self._validate_values(values)
        values["card_design_id"] = (
            await self._resolve_design(fields.card_design) if fields.card_design else None
        )

        key = None
        if image is not None:
            key = await self._store_image(image)
            values["image"] = key

        try:
            card = await operations.create_card(self.session, values)
        except Exception:
            if key is not None:
                await self._discard_blob(key)
            raise

        logger.info("Created card %d (%s) image=%s", card.id, card.name, card.image)
        return card

    async def get(self, card_id: int) -> CardDB:
        """A single card with its design loaded."""
        card = await operations.get_card(self.session, card_id)
        if card is None:
            raise NotFoundError("Card", card_id)
        return card

    async def update(
        self, card_id: int, fields: CardFields, image: ImageUpload | None = None
    ) -> CardDB:
        """
        Update the provided fields of a card.

        Without a new image the stored image key is left untouched. With
        one, the card is pointed at the new blob and the old blob is
        deleted afterwards.
        """
        card = await self.get(card_id)
        previous_key = card.image

        values = fields.provided()
        self._validate_values(values)
        if fields.card_design is not None:
            values["card_design_id"] = await self._resolve_design(fields.card_design)

        new_key = None
        if image is not None:
            new_key = await self._store_image(image)
            values["image"] = new_key

        try:
            updated = await operations.update_card(self.session, card_id, values)
        except Exception:
            if new_key is not None:
                await self._discard_blob(new_key)
            raise

        if updated is None:
            raise NotFoundError("Card", card_id)

        if new_key is not None and previous_key:
            await self._discard_blob(previous_key)

        logger.info("Updated card %d (%s)", updated.id, updated.name)
        return updated

    async def delete(self, card_id: int) -> None:
        """Delete a card and, best-effort, its image."""
        card = await self.get(card_id)

        if card.image:
            await self._discard_blob(card.image)

        await operations.delete_card(self.session, card_id)
        logger.info("Deleted card %d", card_id)

    async def list(self, design_id: int | None = None) -> list[CardDB]:
        """All cards, newest first, optionally only those using one design."""
        return await operations.list_cards(self.session, design_id=design_id)


def get_card_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> CardService:
    """Dependency that provides a CardService bound to the request session."""
    return CardService(session, blobs)

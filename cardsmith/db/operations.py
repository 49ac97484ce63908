"""
Database CRUD operations.

Provides async functions for creating, reading, updating, and deleting
card designs and cards. Card reads always load the referenced design so
callers receive the full style bundle in one round trip.
"""

from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cardsmith.config import MAX_RECORD_ID
from cardsmith.models.db import CardDB, CardDesignDB


def _is_storable_id(record_id: int) -> bool:
    """Ids outside the INTEGER key range cannot match a row."""
    return 1 <= record_id <= MAX_RECORD_ID


# --- Card Design Operations ---


async def get_design(session: AsyncSession, design_id: int) -> CardDesignDB | None:
    """
    Get a card design by id.

    Returns None if no design has this id.
    """
    if not _is_storable_id(design_id):
        return None
    return await session.get(CardDesignDB, design_id)


async def get_design_by_name(session: AsyncSession, name: str) -> CardDesignDB | None:
    """Get a card design by its unique name."""
    result = await session.execute(select(CardDesignDB).where(CardDesignDB.name == name))
    return result.scalar_one_or_none()


async def list_designs(session: AsyncSession) -> list[CardDesignDB]:
    """Get all card designs, newest first."""
    result = await session.execute(
        select(CardDesignDB).order_by(CardDesignDB.created_at.desc(), CardDesignDB.id.desc())
    )
    return list(result.scalars().all())


async def create_design(
    session: AsyncSession, name: str, styles: dict[str, Any]
) -> CardDesignDB:
    """
    Create a new card design.

    Raises IntegrityError if a design with this name already exists.
    """
    design = CardDesignDB(name=name, styles=styles)
    session.add(design)
    await session.flush()
    await session.refresh(design)
    return design


async def update_design(
    session: AsyncSession,
    design_id: int,
    name: str,
    styles: dict[str, Any],
) -> CardDesignDB | None:
    """
    Replace a design's name and style bundle.

    Returns None if the design does not exist.
    Raises IntegrityError if the new name is taken by another design.
    """
    design = await get_design(session, design_id)
    if design is None:
        return None

    design.name = name
    design.styles = styles
    await session.flush()
    return design


async def delete_design(session: AsyncSession, design_id: int) -> bool:
    """
    Delete a card design.

    Cards that used the design keep existing with no design.
    Returns True if deleted, False if not found.
    """
    design = await get_design(session, design_id)
    if design is None:
        return False

    # Not every backend enforces ON DELETE SET NULL (SQLite without the pragma)
    await session.execute(
        update(CardDB).where(CardDB.card_design_id == design_id).values(card_design_id=None)
    )
    await session.delete(design)
    await session.flush()
    return True


# --- Card Operations ---


async def get_card(session: AsyncSession, card_id: int) -> CardDB | None:
    """
    Get a card by id with its design loaded.

    Returns None if no card has this id.
    """
    if not _is_storable_id(card_id):
        return None
    result = await session.execute(
        select(CardDB)
        .where(CardDB.id == card_id)
        .options(selectinload(CardDB.card_design))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_cards(session: AsyncSession, design_id: int | None = None) -> list[CardDB]:
    """
    Get all cards, newest first, with their designs loaded.

    If design_id is given, only cards using that design are returned.
    """
    query = select(CardDB).options(selectinload(CardDB.card_design))
    if design_id is not None:
        if not _is_storable_id(design_id):
            return []
        query = query.where(CardDB.card_design_id == design_id)

    result = await session.execute(query.order_by(CardDB.created_at.desc(), CardDB.id.desc()))
    return list(result.scalars().all())


async def create_card(session: AsyncSession, values: dict[str, Any]) -> CardDB:
    """
    Create a new card from column values.

    Returns the card re-read with its design loaded.
    """
    card = CardDB(**values)
    session.add(card)
    await session.flush()

    loaded = await get_card(session, card.id)
    if loaded is None:
        msg = f"Card {card.id} not found after creation"
        raise RuntimeError(msg)
    return loaded


async def update_card(
    session: AsyncSession, card_id: int, values: dict[str, Any]
) -> CardDB | None:
    """
    Update a card in place.

    Only the keys present in values are written; everything else,
    including the image key, is left as stored.
    Returns None if the card does not exist.
    """
    if not _is_storable_id(card_id):
        return None
    card = await session.get(CardDB, card_id)
    if card is None:
        return None

    for column, value in values.items():
        setattr(card, column, value)
    await session.flush()

    # Re-fetch so a changed design reference is reflected in the relationship
    return await get_card(session, card_id)


async def delete_card(session: AsyncSession, card_id: int) -> bool:
    """
    Delete a card record.

    Returns True if deleted, False if not found.
    """
    if not _is_storable_id(card_id):
        return False
    result = await session.execute(delete(CardDB).where(CardDB.id == card_id))
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]


async def list_image_keys(session: AsyncSession) -> set[str]:
    """Get every blob key currently referenced by a card."""
    result = await session.execute(select(CardDB.image).where(CardDB.image.is_not(None)))
    return {key for key in result.scalars().all() if key}

"""Tests for SQLAlchemy ORM models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cardsmith.models.db import BlobDB, CardDB, CardDesignDB


class TestCardDesignDB:
    async def test_create_design(self, session: AsyncSession) -> None:
        """Can create a design with a style bundle."""
        design = CardDesignDB(name="Fire", styles={"background": "#ff0000"})
        session.add(design)
        await session.commit()

        result = await session.execute(select(CardDesignDB).where(CardDesignDB.name == "Fire"))
        saved = result.scalar_one()

        assert saved.id is not None
        assert saved.styles == {"background": "#ff0000"}
        assert saved.created_at is not None

    async def test_name_unique(self, session: AsyncSession) -> None:
        """Design names must be unique."""
        session.add(CardDesignDB(name="Fire", styles={}))
        await session.commit()

        session.add(CardDesignDB(name="Fire", styles={}))
        with pytest.raises(IntegrityError):
            await session.commit()

    async def test_repr(self) -> None:
        design = CardDesignDB(id=3, name="Water")

        assert repr(design) == "<CardDesignDB(id=3, name=Water)>"


class TestCardDB:
    async def test_create_card_without_design(self, session: AsyncSession) -> None:
        """A card does not need a design or an image."""
        card = CardDB(name="Pikachu", type="Electric", hp=35, speed=90)
        session.add(card)
        await session.commit()

        assert card.id is not None
        assert card.card_design_id is None
        assert card.image is None
        assert card.attack == 0

    async def test_card_loads_design(self, session: AsyncSession) -> None:
        """A card's design can be loaded through the relationship."""
        design = CardDesignDB(name="Fire", styles={})
        session.add(design)
        await session.flush()
        session.add(CardDB(name="Charmander", card_design_id=design.id))
        await session.commit()

        result = await session.execute(
            select(CardDB).options(selectinload(CardDB.card_design))
        )
        card = result.scalar_one()

        assert card.card_design is not None
        assert card.card_design.name == "Fire"


class TestBlobDB:
    async def test_store_blob(self, session: AsyncSession) -> None:
        session.add(BlobDB(key="1-abc-pic.png", content_type="image/png", data=b"\x89PNG"))
        await session.commit()

        result = await session.execute(select(BlobDB).where(BlobDB.key == "1-abc-pic.png"))
        blob = result.scalar_one()

        assert blob.data == b"\x89PNG"
        assert blob.content_type == "image/png"

    async def test_key_unique(self, session: AsyncSession) -> None:
        session.add(BlobDB(key="same", data=b"a"))
        await session.commit()

        session.add(BlobDB(key="same", data=b"b"))
        with pytest.raises(IntegrityError):
            await session.commit()

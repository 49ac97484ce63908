"""Tests for database CRUD operations."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardsmith.db.operations import (
    create_card,
    create_design,
    delete_card,
    delete_design,
    get_card,
    get_design,
    get_design_by_name,
    list_cards,
    list_designs,
    list_image_keys,
    update_card,
    update_design,
)


class TestDesignOperations:
    async def test_create_design(self, session: AsyncSession) -> None:
        """Can create a new design."""
        design = await create_design(session, "Fire", {"background": "#ff0000"})

        assert design.id is not None
        assert design.name == "Fire"
        assert design.created_at is not None

    async def test_create_duplicate_name(self, session: AsyncSession) -> None:
        """Duplicate names are rejected by the unique constraint."""
        await create_design(session, "Fire", {})

        with pytest.raises(IntegrityError):
            await create_design(session, "Fire", {})

    async def test_get_design(self, session: AsyncSession) -> None:
        created = await create_design(session, "Fire", {})
        await session.commit()

        assert (await get_design(session, created.id)).name == "Fire"
        assert (await get_design_by_name(session, "Fire")).id == created.id

    async def test_get_design_not_found(self, session: AsyncSession) -> None:
        assert await get_design(session, 999) is None
        assert await get_design_by_name(session, "Nope") is None

    async def test_list_designs_newest_first(self, session: AsyncSession) -> None:
        await create_design(session, "First", {})
        await create_design(session, "Second", {})
        await create_design(session, "Third", {})
        await session.commit()

        designs = await list_designs(session)

        assert [d.name for d in designs] == ["Third", "Second", "First"]

    async def test_update_design_replaces_styles(self, session: AsyncSession) -> None:
        created = await create_design(session, "Fire", {"background": "#ff0000", "borderWidth": 4})
        await session.commit()

        updated = await update_design(session, created.id, "Inferno", {"background": "#aa0000"})

        assert updated is not None
        assert updated.name == "Inferno"
        assert updated.styles == {"background": "#aa0000"}

    async def test_update_design_not_found(self, session: AsyncSession) -> None:
        assert await update_design(session, 999, "Fire", {}) is None

    async def test_delete_design(self, session: AsyncSession) -> None:
        created = await create_design(session, "Fire", {})
        await session.commit()

        assert await delete_design(session, created.id) is True
        assert await get_design(session, created.id) is None

    async def test_delete_design_not_found(self, session: AsyncSession) -> None:
        assert await delete_design(session, 999) is False

    async def test_delete_design_keeps_cards(self, session: AsyncSession) -> None:
        """Cards using a deleted design survive with no design."""
        design = await create_design(session, "Fire", {})
        card = await create_card(session, {"name": "Charmander", "card_design_id": design.id})
        await session.commit()

        await delete_design(session, design.id)
        await session.commit()

        reloaded = await get_card(session, card.id)
        assert reloaded is not None
        assert reloaded.card_design_id is None
        assert reloaded.card_design is None


class TestCardOperations:
    async def test_create_card_loads_design(self, session: AsyncSession) -> None:
        design = await create_design(session, "Fire", {"background": "#ff0000"})

        card = await create_card(
            session,
            {"name": "Charmander", "type": "Fire", "hp": 39, "card_design_id": design.id},
        )

        assert card.id is not None
        assert card.hp == 39
        assert card.card_design is not None
        assert card.card_design.styles == {"background": "#ff0000"}

    async def test_get_card_not_found(self, session: AsyncSession) -> None:
        assert await get_card(session, 999) is None

    async def test_ids_beyond_integer_range(self, session: AsyncSession) -> None:
        too_big = 2**63

        assert await get_card(session, too_big) is None
        assert await get_design(session, too_big) is None
        assert await update_card(session, too_big, {"hp": 1}) is None
        assert await delete_card(session, too_big) is False
        assert await delete_design(session, too_big) is False
        assert await list_cards(session, design_id=too_big) == []

    async def test_list_cards_newest_first(self, session: AsyncSession) -> None:
        await create_card(session, {"name": "Bulbasaur"})
        await create_card(session, {"name": "Charmander"})
        await create_card(session, {"name": "Squirtle"})
        await session.commit()

        cards = await list_cards(session)

        assert [c.name for c in cards] == ["Squirtle", "Charmander", "Bulbasaur"]

    async def test_list_cards_by_design(self, session: AsyncSession) -> None:
        fire = await create_design(session, "Fire", {})
        water = await create_design(session, "Water", {})
        await create_card(session, {"name": "Charmander", "card_design_id": fire.id})
        await create_card(session, {"name": "Squirtle", "card_design_id": water.id})
        await create_card(session, {"name": "Eevee"})
        await session.commit()

        cards = await list_cards(session, design_id=fire.id)

        assert [c.name for c in cards] == ["Charmander"]

    async def test_update_card_partial(self, session: AsyncSession) -> None:
        """Only the given columns change."""
        card = await create_card(
            session, {"name": "Charmander", "hp": 39, "image": "1-abc-charmander.png"}
        )
        await session.commit()

        updated = await update_card(session, card.id, {"hp": 58, "name": "Charmeleon"})

        assert updated is not None
        assert updated.name == "Charmeleon"
        assert updated.hp == 58
        assert updated.image == "1-abc-charmander.png"

    async def test_update_card_changes_design(self, session: AsyncSession) -> None:
        fire = await create_design(session, "Fire", {})
        water = await create_design(session, "Water", {})
        card = await create_card(session, {"name": "Eevee", "card_design_id": fire.id})
        await session.commit()

        updated = await update_card(session, card.id, {"card_design_id": water.id})

        assert updated.card_design.name == "Water"

    async def test_update_card_not_found(self, session: AsyncSession) -> None:
        assert await update_card(session, 999, {"hp": 1}) is None

    async def test_delete_card(self, session: AsyncSession) -> None:
        card = await create_card(session, {"name": "Charmander"})
        await session.commit()

        assert await delete_card(session, card.id) is True
        assert await get_card(session, card.id) is None
        assert await delete_card(session, card.id) is False

    async def test_list_image_keys(self, session: AsyncSession) -> None:
        await create_card(session, {"name": "A", "image": "1-aaa-a.png"})
        await create_card(session, {"name": "B"})
        await create_card(session, {"name": "C", "image": "2-ccc-c.png"})
        await session.commit()

        assert await list_image_keys(session) == {"1-aaa-a.png", "2-ccc-c.png"}

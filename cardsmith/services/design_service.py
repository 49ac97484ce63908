"""
Card design service.

Creates, lists, replaces and deletes card designs. Designs have no blob
dependency; deleting one leaves the cards that used it in place.
"""

import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardsmith.db import operations
from cardsmith.db.database import get_session
from cardsmith.models.db import CardDesignDB
from cardsmith.models.design import DesignStyles
from cardsmith.models.failure import DuplicateNameError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidInputError("Design name cannot be empty")
    return cleaned


class DesignService:
    """CRUD for card designs on top of a database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, styles: DesignStyles) -> CardDesignDB:
        """
        Create a design.

        Raises DuplicateNameError if another design already has this name.
        """
        name = _clean_name(name)
        if await operations.get_design_by_name(self.session, name) is not None:
            raise DuplicateNameError(name)

        try:
            design = await operations.create_design(self.session, name, styles.to_document())
        except IntegrityError as e:
            # Lost a race with a concurrent create of the same name
            raise DuplicateNameError(name) from e

        logger.info("Created card design %d (%s)", design.id, design.name)
        return design

    async def list(self) -> list[CardDesignDB]:
        """All designs, newest first."""
        return await operations.list_designs(self.session)

    async def get(self, design_id: int) -> CardDesignDB:
        design = await operations.get_design(self.session, design_id)
        if design is None:
            raise NotFoundError("Card design", design_id)
        return design

    async def update(self, design_id: int, name: str, styles: DesignStyles) -> CardDesignDB:
        """
        Replace a design's name and entire style bundle.

        Style fields missing from `styles` revert to their defaults.
        """
        name = _clean_name(name)
        await self.get(design_id)

        existing = await operations.get_design_by_name(self.session, name)
        if existing is not None and existing.id != design_id:
            raise DuplicateNameError(name)

        try:
            design = await operations.update_design(
                self.session, design_id, name, styles.to_document()
            )
        except IntegrityError as e:
            raise DuplicateNameError(name) from e

        if design is None:
            raise NotFoundError("Card design", design_id)

        logger.info("Updated card design %d (%s)", design.id, design.name)
        return design

    async def delete(self, design_id: int) -> None:
        """
        Delete a design without checking for cards that reference it.

        Those cards are kept and lose their design reference.
        """
        deleted = await operations.delete_design(self.session, design_id)
        if not deleted:
            raise NotFoundError("Card design", design_id)
        logger.info("Deleted card design %d", design_id)


def get_design_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DesignService:
    """Dependency that provides a DesignService bound to the request session."""
    return DesignService(session)

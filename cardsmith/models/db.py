"""
SQLAlchemy ORM models for persistent storage.

Designs and cards are stored as rows; a card points at its design by id
only, so a design can be removed without touching the cards that used it.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardDesignDB(Base):
    """
    A named visual template for cards.

    The style bundle is stored as JSON and replaced as a whole on update.
    """

    __tablename__ = "card_designs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    styles: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<CardDesignDB(id={self.id}, name={self.name})>"


class CardDB(Base):
    """
    A single trading card.

    `image` holds the blob key of the uploaded picture, if any.
    """

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    type: Mapped[str] = mapped_column(String(100), default="")

    hp: Mapped[int] = mapped_column(Integer, default=0)
    attack: Mapped[int] = mapped_column(Integer, default=0)
    defense: Mapped[int] = mapped_column(Integer, default=0)
    special_attack: Mapped[int] = mapped_column(Integer, default=0)
    special_defense: Mapped[int] = mapped_column(Integer, default=0)
    speed: Mapped[int] = mapped_column(Integer, default=0)

    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    card_design_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("card_designs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Lookup only; the design is not owned by the card
    card_design: Mapped["CardDesignDB | None"] = relationship()

    def __repr__(self) -> str:
        return f"<CardDB(id={self.id}, name={self.name})>"


class BlobDB(Base):
    """
    Binary payload stored in the database.

    Used by the database blob backend in place of files on disk.
    """

    __tablename__ = "blobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    content_type: Mapped[str] = mapped_column(String(100), default="application/octet-stream")
    data: Mapped[bytes] = mapped_column(LargeBinary)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<BlobDB(key={self.key}, size={len(self.data)})>"

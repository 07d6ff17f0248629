"""
SQLAlchemy ORM models for persistent storage.

Decks are owned by the deck builder; this service only reads them. The
tables mirror the DeckComposition dataclass plus the ownership data needed
for access checks.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def _new_deck_id() -> str:
    return str(uuid.uuid4())


class DeckDB(Base):
    """
    A user's deck.

    Public decks may be tested by anyone; private decks only by the owner
    and collaborators.
    """

    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_deck_id)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    name: Mapped[str] = mapped_column(String(255))
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    cards: Mapped[list["DeckCardDB"]] = relationship(
        back_populates="deck",
        cascade="all, delete-orphan",
        order_by="DeckCardDB.position",
    )
    collaborators: Mapped[list["DeckCollaboratorDB"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<DeckDB(id={self.id}, name={self.name})>"


class DeckCardDB(Base):
    """One deck list line: a card, its category and its copy count."""

    __tablename__ = "deck_cards"
    __table_args__ = (UniqueConstraint("deck_id", "card_id", name="uq_deck_card"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    card_id: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(255), default="")
    category: Mapped[str] = mapped_column(String(50))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    position: Mapped[int] = mapped_column(Integer, default=0)

    deck: Mapped["DeckDB"] = relationship(back_populates="cards")

    def __repr__(self) -> str:
        return f"<DeckCardDB(card={self.card_id}, qty={self.quantity})>"


class DeckCollaboratorDB(Base):
    """A user granted access to someone else's private deck."""

    __tablename__ = "deck_collaborators"
    __table_args__ = (UniqueConstraint("deck_id", "user_id", name="uq_deck_collaborator"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True)

    deck: Mapped["DeckDB"] = relationship(back_populates="collaborators")

    def __repr__(self) -> str:
        return f"<DeckCollaboratorDB(deck={self.deck_id}, user={self.user_id})>"

"""
Database operations for decks.

Provides async functions to store decks, grant access to them and load them
as DeckComposition values with an ownership check.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from decktester.models.card import CardCategory, CardEntry
from decktester.models.db import DeckCardDB, DeckCollaboratorDB, DeckDB
from decktester.models.deck import DeckComposition
from decktester.models.failure import DeckNotFoundError, InvalidDeckError, UnauthorizedAccessError

# --- Deck Operations ---


async def get_deck(session: AsyncSession, deck_id: str) -> DeckDB | None:
    """
    Get a deck with its cards and collaborators.

    Returns None if no deck exists with this id.
    """
    result = await session.execute(
        select(DeckDB)
        .where(DeckDB.id == deck_id)
        .options(selectinload(DeckDB.cards), selectinload(DeckDB.collaborators))
    )
    return result.scalar_one_or_none()


async def create_deck(
    session: AsyncSession,
    user_id: str,
    name: str,
    entries: Sequence[CardEntry],
    is_public: bool = False,
) -> DeckDB:
    """Store a new deck owned by user_id, keeping deck list order."""
    deck = DeckDB(user_id=user_id, name=name, is_public=is_public)
    for position, entry in enumerate(entries):
        deck.cards.append(
            DeckCardDB(
                card_id=entry.card_id,
                name=entry.name,
                category=entry.category.value,
                quantity=entry.quantity,
                position=position,
            )
        )
    session.add(deck)
    await session.flush()
    return deck


def deck_to_composition(deck: DeckDB) -> DeckComposition:
    """
    Convert a database deck to a domain model.

    Raises:
        InvalidDeckError: A stored card has an unknown category
    """
    entries: list[CardEntry] = []
    for card in deck.cards:
        try:
            category = CardCategory(card.category)
        except ValueError:
            raise InvalidDeckError(card.card_id, f"unknown category '{card.category}'") from None
        entries.append(
            CardEntry(
                card_id=card.card_id,
                category=category,
                quantity=card.quantity,
                name=card.name,
            )
        )
    return DeckComposition(entries=tuple(entries), deck_id=deck.id, name=deck.name)


# --- Access Operations ---


async def add_collaborator(session: AsyncSession, deck_id: str, user_id: str) -> None:
    """
    Grant user_id read access to a private deck.

    Raises:
        DeckNotFoundError: No deck with this id
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        raise DeckNotFoundError(deck_id)

    if any(c.user_id == user_id for c in deck.collaborators):
        return

    deck.collaborators.append(DeckCollaboratorDB(user_id=user_id))
    await session.flush()


def has_access(deck: DeckDB, user_id: str) -> bool:
    """Owners, collaborators and anyone for a public deck may read it."""
    if deck.user_id == user_id or deck.is_public:
        return True
    return any(c.user_id == user_id for c in deck.collaborators)


async def load_deck_composition(
    session: AsyncSession, deck_id: str, user_id: str
) -> DeckComposition:
    """
    Load a deck for testing on behalf of user_id.

    Raises:
        DeckNotFoundError: No deck with this id
        UnauthorizedAccessError: user_id may not read this deck
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        raise DeckNotFoundError(deck_id)

    if not has_access(deck, user_id):
        raise UnauthorizedAccessError(deck_id)

    return deck_to_composition(deck)

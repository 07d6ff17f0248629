from collections.abc import Callable

import pytest

from decktester.models.card import CardCategory, CardEntry
from decktester.models.deck import DeckComposition

DeckFactory = Callable[..., DeckComposition]


@pytest.fixture
def build_deck() -> DeckFactory:
    """Build a deck from category counts, four copies per card id.

    Example: build_deck(basic_unit=20, trainer=40)
    """

    def _build(name: str = "Test Deck", **counts: int) -> DeckComposition:
        entries: list[CardEntry] = []
        for category_name, total in counts.items():
            category = CardCategory(category_name)
            index = 0
            while total > 0:
                quantity = min(4, total)
                entries.append(
                    CardEntry(
                        card_id=f"{category_name}-{index}",
                        category=category,
                        quantity=quantity,
                    )
                )
                total -= quantity
                index += 1
        return DeckComposition(entries=tuple(entries), deck_id="deck-1", name=name)

    return _build


@pytest.fixture
def standard_deck(build_deck: DeckFactory) -> DeckComposition:
    """20 basic units, 20 evolution units, 20 trainers."""
    return build_deck(basic_unit=20, evolution_unit=20, trainer=20)


@pytest.fixture
def energy_deck(build_deck: DeckFactory) -> DeckComposition:
    """A typical list: units, trainers and energy."""
    return build_deck(
        basic_unit=12,
        evolution_unit=8,
        trainer=28,
        special_energy=2,
        basic_energy=10,
    )


@pytest.fixture
def all_basic_deck(build_deck: DeckFactory) -> DeckComposition:
    """Every card is a basic unit, so no hand is ever a mulligan."""
    return build_deck(basic_unit=60)


@pytest.fixture
def no_basic_deck(build_deck: DeckFactory) -> DeckComposition:
    """No basic units, so every hand is a mulligan."""
    return build_deck(evolution_unit=20, trainer=30, basic_energy=10)

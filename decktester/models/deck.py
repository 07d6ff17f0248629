from collections import Counter
from dataclasses import dataclass, field

from decktester.models.card import CardCategory, CardEntry, CardInstance


@dataclass(frozen=True)
class DeckComposition:
    """
    A deck list as loaded from storage.

    Read-only input to the simulator. Copy limits are checked by the deck
    builder before a composition ever reaches this package.

    Attributes:
        entries: Ordered card entries (deck list order)
        deck_id: Storage identifier, if loaded from the database
        name: Deck name
    """

    entries: tuple[CardEntry, ...] = field(default_factory=tuple)
    deck_id: str = ""
    name: str = ""

    def total_cards(self) -> int:
        """Total cards in deck (counting quantities)."""
        return sum(entry.quantity for entry in self.entries)

    def card_ids(self) -> list[str]:
        """Distinct card ids in deck list order."""
        return list(dict.fromkeys(entry.card_id for entry in self.entries))

    def count_by_category(self) -> dict[CardCategory, int]:
        """Copies per category (categories with no cards are omitted)."""
        counts: Counter[CardCategory] = Counter()
        for entry in self.entries:
            counts[entry.category] += entry.quantity
        return dict(counts)

    def card_counts(self) -> Counter[str]:
        """Multiset of card ids."""
        counts: Counter[str] = Counter()
        for entry in self.entries:
            counts[entry.card_id] += entry.quantity
        return counts


@dataclass(frozen=True)
class ShuffledDeck:
    """
    A deck in a fixed random order.

    The sequence is never mutated. Draws advance a cursor held by the
    caller, so the full order stays inspectable after a trial.
    """

    cards: tuple[CardInstance, ...]
    seed: int

    def __len__(self) -> int:
        return len(self.cards)

    def take(self, cursor: int, count: int) -> tuple[CardInstance, ...]:
        """Cards from cursor onward, at most count of them."""
        return self.cards[cursor : cursor + count]

    def card_counts(self) -> Counter[str]:
        """Multiset of card ids."""
        return Counter(card.card_id for card in self.cards)

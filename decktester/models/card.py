from dataclasses import dataclass
from enum import Enum


class CardCategory(str, Enum):
    """Simulation-relevant card categories."""

    BASIC_UNIT = "basic_unit"  # Playable with no prerequisites
    EVOLUTION_UNIT = "evolution_unit"  # Needs a unit already in play
    TRAINER = "trainer"
    SPECIAL_ENERGY = "special_energy"
    BASIC_ENERGY = "basic_energy"

    @property
    def is_energy(self) -> bool:
        return self in (CardCategory.SPECIAL_ENERGY, CardCategory.BASIC_ENERGY)

    @property
    def is_unit(self) -> bool:
        return self in (CardCategory.BASIC_UNIT, CardCategory.EVOLUTION_UNIT)


@dataclass(frozen=True, slots=True)
class CardEntry:
    """
    One line of a deck list.

    Attributes:
        card_id: Opaque card identifier
        category: Category tag used by the mulligan rule and hand analysis
        quantity: Number of identical copies in the deck
        name: Display name (optional, never used for logic)
    """

    card_id: str
    category: CardCategory
    quantity: int
    name: str = ""


@dataclass(frozen=True, slots=True)
class CardInstance:
    """
    A single physical copy of a card.

    Copies of the same card share card_id but never instance_id.
    """

    instance_id: int
    card_id: str
    category: CardCategory

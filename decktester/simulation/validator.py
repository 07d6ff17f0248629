"""
Input gates run once per session, before any trial is dispatched.

Both checks are pure: they raise or return None.
"""

from decktester.config import DECK_SIZE, MAX_HANDS, MAX_PRIZE_COUNT, MAX_TURN_HORIZON, MIN_HANDS
from decktester.models.card import CardCategory
from decktester.models.deck import DeckComposition
from decktester.models.failure import (
    EmptyCategoryError,
    InvalidConfigurationError,
    InvalidDeckError,
    WrongDeckSizeError,
)
from decktester.models.simulation import SimulationConfig


def validate_deck(deck: DeckComposition, deck_size: int = DECK_SIZE) -> None:
    """
    Check a deck can be simulated.

    Raises:
        InvalidDeckError: An entry has an empty id or a non-positive quantity
        WrongDeckSizeError: Total quantity differs from deck_size
        EmptyCategoryError: The deck holds no basic units
    """
    for entry in deck.entries:
        if not entry.card_id:
            raise InvalidDeckError(entry.name or "<unnamed>", "card id is empty")
        if entry.quantity <= 0:
            raise InvalidDeckError(
                entry.card_id, f"quantity must be positive, got {entry.quantity}"
            )

    total = deck.total_cards()
    if total != deck_size:
        raise WrongDeckSizeError(expected_size=deck_size, actual_size=total)

    if deck.count_by_category().get(CardCategory.BASIC_UNIT, 0) == 0:
        raise EmptyCategoryError(CardCategory.BASIC_UNIT.value)


def validate_config(config: SimulationConfig, deck_size: int = DECK_SIZE) -> None:
    """
    Check session parameters are in range.

    number_of_hands and turn_horizon are capped so the worst-case cost of a
    session is known before anything runs.

    Raises:
        InvalidConfigurationError: The first out-of-range parameter found
    """
    if not MIN_HANDS <= config.number_of_hands <= MAX_HANDS:
        raise InvalidConfigurationError(
            "number_of_hands", config.number_of_hands, f"an integer from {MIN_HANDS} to {MAX_HANDS}"
        )
    if not 1 <= config.hand_size <= deck_size:
        raise InvalidConfigurationError(
            "hand_size", config.hand_size, f"an integer from 1 to {deck_size}"
        )
    if not 0 <= config.turn_horizon <= MAX_TURN_HORIZON:
        raise InvalidConfigurationError(
            "turn_horizon", config.turn_horizon, f"an integer from 0 to {MAX_TURN_HORIZON}"
        )
    if config.max_mulligan_attempts < 1:
        raise InvalidConfigurationError(
            "max_mulligan_attempts", config.max_mulligan_attempts, "at least 1 attempt"
        )
    if not 0 <= config.prize_count <= MAX_PRIZE_COUNT:
        raise InvalidConfigurationError(
            "prize_count", config.prize_count, f"an integer from 0 to {MAX_PRIZE_COUNT}"
        )
    if config.hand_size + config.prize_count > deck_size:
        raise InvalidConfigurationError(
            "prize_count",
            config.prize_count,
            f"at most {deck_size - config.hand_size} with a {config.hand_size}-card hand",
        )

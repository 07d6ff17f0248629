"""
Simulation models.

A testing session is a set of independent trials over one deck. Each trial
shuffles the deck, resolves an opening hand (mulligans included), then draws
for a fixed number of turns. Everything here is immutable once built: trials
are recorded, never updated.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from decktester.config import (
    DEFAULT_HANDS,
    DEFAULT_TURN_HORIZON,
    HAND_SIZE,
    MAX_MULLIGAN_ATTEMPTS,
)
from decktester.models.card import CardCategory, CardInstance
from decktester.models.failure import FailureKind

Hand = tuple[CardInstance, ...]
MulliganRule = Callable[[Hand], bool]
DrawCount = Callable[[int], int]


def has_basic_unit(hand: Hand) -> bool:
    """Default mulligan rule: keep any hand holding a basic unit."""
    return any(card.category == CardCategory.BASIC_UNIT for card in hand)


def single_draw(turn: int) -> int:  # noqa: ARG001  Required by DrawCount interface
    """Default draw step: one card per turn."""
    return 1


@dataclass(frozen=True)
class SimulationConfig:
    """
    Parameters for one testing session.

    Attributes:
        number_of_hands: Trials to run (1-100)
        hand_size: Cards in the opening hand
        turn_horizon: Turns to draw for after the opening hand
        mulligan_rule: Predicate a hand must satisfy to be kept
        random_seed_base: Base seed every trial seed is derived from
        max_mulligan_attempts: Hands drawn before a trial gives up
        prize_count: Cards set aside after the opening hand
        draw_count: Cards drawn on a given turn
        tracked_cards: Card ids to report probabilities for (None = all)
    """

    number_of_hands: int = DEFAULT_HANDS
    hand_size: int = HAND_SIZE
    turn_horizon: int = DEFAULT_TURN_HORIZON
    mulligan_rule: MulliganRule = has_basic_unit
    random_seed_base: int = 0
    max_mulligan_attempts: int = MAX_MULLIGAN_ATTEMPTS
    prize_count: int = 0
    draw_count: DrawCount = single_draw
    tracked_cards: tuple[str, ...] | None = None

    @property
    def mulligan_rule_name(self) -> str:
        return getattr(self.mulligan_rule, "__name__", type(self.mulligan_rule).__name__)


@dataclass(frozen=True)
class HandAnalysis:
    """
    What an opening hand offers for the first turn.

    Attributes:
        has_basic_unit: Hand holds at least one basic unit
        unit_count: Basic and evolution units in hand
        energy_count: Basic and special energy in hand
        trainer_count: Trainers in hand
        setup_potential: Turn-one setup score from 0 to 100
        problems: Human-readable issues with the hand
    """

    has_basic_unit: bool
    unit_count: int
    energy_count: int
    trainer_count: int
    setup_potential: int = 0
    problems: tuple[str, ...] = ()


@dataclass(frozen=True)
class TrialResult:
    """
    One fully simulated game opening.

    Attributes:
        trial_index: Position of this trial in its session
        mulligan_count: Hands rejected before the kept one
        opening_hand: The kept hand
        turn_snapshots: Hand after each turn's draw (index 0 = turn 1)
        decked_out: A draw was attempted with no cards left
        analysis: Analysis of the opening hand
        prizes: Cards set aside after the opening hand
        seed: Trial seed (diagnostics only)
    """

    trial_index: int
    mulligan_count: int
    opening_hand: Hand
    turn_snapshots: tuple[Hand, ...]
    decked_out: bool
    analysis: HandAnalysis
    prizes: Hand = ()
    seed: int = field(default=0, repr=False)

    @property
    def final_hand(self) -> Hand:
        if self.turn_snapshots:
            return self.turn_snapshots[-1]
        return self.opening_hand


@dataclass(frozen=True)
class TrialFailure:
    """A trial that did not complete. Never counted in aggregates."""

    trial_index: int
    kind: FailureKind
    reason: str


@dataclass(frozen=True)
class CardProbability:
    """
    How quickly one card surfaces.

    Attributes:
        card_id: The tracked card
        by_turn: Probability the card is in hand by turn t (index 0 = opening)
        average_first_turn: Mean turn the card first appears, over trials
            where it appears at all (None if it never did)
    """

    card_id: str
    by_turn: tuple[float | None, ...]
    average_first_turn: float | None = None


@dataclass(frozen=True)
class AggregateStats:
    """
    Summary statistics over the successful trials of a session.

    Every rate uses the successful trial count as its denominator. With no
    successful trials all derived values are None and mulligan_distribution
    is empty.
    """

    requested_trials: int
    successful_trials: int
    failed_trials: int
    mulligan_probability: float | None = None
    average_mulligans: float | None = None
    mulligan_distribution: dict[int, float] = field(default_factory=dict)
    average_setup_turn: float | None = None
    deck_out_rate: float | None = None
    energy_drought_rate: float | None = None
    dead_draw_rate: float | None = None
    combo_success_rates: dict[str, float | None] = field(default_factory=dict)
    card_probabilities: dict[str, CardProbability] = field(default_factory=dict)


@dataclass(frozen=True)
class TestingSession:
    """
    The result of one simulation request.

    Attributes:
        config: Configuration the session ran with
        trials: Completed trials in trial-index order
        failures: Trials that failed, in trial-index order
        aggregate_stats: Statistics over the completed trials
    """

    __test__ = False  # Not a pytest test class

    config: SimulationConfig
    trials: tuple[TrialResult, ...]
    failures: tuple[TrialFailure, ...]
    aggregate_stats: AggregateStats

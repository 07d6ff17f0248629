"""
Opening hand resolution.

The mulligan loop is an explicit state machine:

    DRAWING -> EVALUATING -> RESOLVED
                   |
                   +-> RESHUFFLING -> DRAWING   (hand rejected, attempts left)
                   +-> EXHAUSTED                (hand rejected, no attempts left)

The attempt bound is part of the transition table, so a rule that no hand
can satisfy ends in EXHAUSTED instead of looping.
"""

from dataclasses import dataclass
from enum import Enum

from decktester.config import MAX_MULLIGAN_ATTEMPTS
from decktester.models.deck import ShuffledDeck
from decktester.models.failure import MulliganLoopExceededError
from decktester.models.simulation import Hand, MulliganRule, has_basic_unit
from decktester.simulation.seeds import derive_seed
from decktester.simulation.shuffle import reshuffle


class MulliganState(str, Enum):
    """States of the opening hand resolver."""

    DRAWING = "drawing"
    EVALUATING = "evaluating"
    RESHUFFLING = "reshuffling"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({MulliganState.RESOLVED, MulliganState.EXHAUSTED})


@dataclass(frozen=True)
class OpeningHand:
    """
    A kept opening hand.

    Attributes:
        hand: The kept hand
        mulligan_count: Hands rejected before this one
        deck: The deck order the kept hand was drawn from
        cursor: Position of the next card to draw
    """

    hand: Hand
    mulligan_count: int
    deck: ShuffledDeck
    cursor: int


@dataclass
class MulliganResolver:
    """
    Drives one trial's mulligan loop a transition at a time.

    Each reshuffle consumes the next seed of the trial-local sequence
    derive_seed(seed, "mulligan", n), so successive mulligans are
    uncorrelated and still reproducible.
    """

    deck: ShuffledDeck
    hand_size: int
    mulligan_rule: MulliganRule
    seed: int
    max_attempts: int = MAX_MULLIGAN_ATTEMPTS
    state: MulliganState = MulliganState.DRAWING
    attempts: int = 0
    mulligan_count: int = 0
    candidate: Hand = ()

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def step(self) -> MulliganState:
        """Perform one transition and return the new state."""
        if self.state == MulliganState.DRAWING:
            self.candidate = self.deck.take(0, self.hand_size)
            self.attempts += 1
            self.state = MulliganState.EVALUATING

        elif self.state == MulliganState.EVALUATING:
            if self.mulligan_rule(self.candidate):
                self.state = MulliganState.RESOLVED
            elif self.attempts >= self.max_attempts:
                self.state = MulliganState.EXHAUSTED
            else:
                self.mulligan_count += 1
                self.state = MulliganState.RESHUFFLING

        elif self.state == MulliganState.RESHUFFLING:
            # The rejected hand goes back into the deck before shuffling
            reshuffle_seed = derive_seed(self.seed, "mulligan", self.mulligan_count)
            self.deck = reshuffle(self.deck, reshuffle_seed)
            self.candidate = ()
            self.state = MulliganState.DRAWING

        else:
            raise ValueError(f"Resolver already finished in state {self.state.value}")

        return self.state

    def resolve(self) -> OpeningHand:
        """
        Run to a terminal state.

        Raises:
            MulliganLoopExceededError: No hand satisfied the rule within max_attempts
        """
        while not self.is_finished:
            self.step()

        if self.state == MulliganState.EXHAUSTED:
            raise MulliganLoopExceededError(attempts=self.attempts)

        return OpeningHand(
            hand=self.candidate,
            mulligan_count=self.mulligan_count,
            deck=self.deck,
            cursor=len(self.candidate),
        )


def draw_opening_hand(
    deck: ShuffledDeck,
    hand_size: int,
    mulligan_rule: MulliganRule = has_basic_unit,
    seed: int = 0,
    max_attempts: int = MAX_MULLIGAN_ATTEMPTS,
) -> OpeningHand:
    """
    Draw an opening hand, mulliganing until the rule is satisfied.

    Args:
        deck: Shuffled deck to draw the first hand from
        hand_size: Cards per hand
        mulligan_rule: Predicate a hand must satisfy to be kept
        seed: Trial-local seed that reshuffle seeds are derived from
        max_attempts: Most hands to draw before giving up

    Returns:
        OpeningHand with the kept hand, mulligan count and deck cursor

    Raises:
        MulliganLoopExceededError: No hand satisfied the rule within max_attempts
    """
    resolver = MulliganResolver(
        deck=deck,
        hand_size=hand_size,
        mulligan_rule=mulligan_rule,
        seed=seed,
        max_attempts=max_attempts,
    )
    return resolver.resolve()

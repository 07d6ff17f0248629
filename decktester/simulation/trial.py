"""
Single-trial orchestration.

A trial is one simulated game opening: shuffle, opening hand, prizes, then
the per-turn draws. Trials derive their own seeds and share nothing, so any
trial can be re-run on its own from (deck, config, trial_index).
"""

import logging

from decktester.models.deck import DeckComposition
from decktester.models.failure import MulliganLoopExceededError
from decktester.models.simulation import SimulationConfig, TrialFailure, TrialResult
from decktester.simulation.hand_analysis import analyze_hand
from decktester.simulation.opening_hand import draw_opening_hand
from decktester.simulation.seeds import derive_seed
from decktester.simulation.shuffle import shuffle
from decktester.simulation.turns import step_turns

logger = logging.getLogger(__name__)


def trial_seed(random_seed_base: int, trial_index: int) -> int:
    """Seed for one trial of a session."""
    return derive_seed(random_seed_base, "trial", trial_index)


def run_trial(deck: DeckComposition, config: SimulationConfig, trial_index: int) -> TrialResult:
    """
    Run one trial end to end.

    Raises:
        MulliganLoopExceededError: No acceptable opening hand was drawn
    """
    seed = trial_seed(config.random_seed_base, trial_index)

    opening = draw_opening_hand(
        shuffle(deck, seed),
        hand_size=config.hand_size,
        mulligan_rule=config.mulligan_rule,
        seed=seed,
        max_attempts=config.max_mulligan_attempts,
    )

    prizes = opening.deck.take(opening.cursor, config.prize_count)
    cursor = opening.cursor + len(prizes)

    turns = step_turns(
        opening.hand,
        opening.deck,
        cursor,
        config.turn_horizon,
        draw_count=config.draw_count,
    )

    return TrialResult(
        trial_index=trial_index,
        mulligan_count=opening.mulligan_count,
        opening_hand=opening.hand,
        turn_snapshots=turns.snapshots,
        decked_out=turns.decked_out,
        analysis=analyze_hand(opening.hand),
        prizes=prizes,
        seed=seed,
    )


def run_trial_safely(
    deck: DeckComposition, config: SimulationConfig, trial_index: int
) -> TrialResult | TrialFailure:
    """
    Run one trial, recording a mulligan-loop failure instead of raising it.

    One trial failing must never abort its siblings.
    """
    try:
        return run_trial(deck, config, trial_index)
    except MulliganLoopExceededError as e:
        logger.warning(
            "TRIAL_FAILED",
            extra={
                "trial_index": trial_index,
                "seed": trial_seed(config.random_seed_base, trial_index),
                "attempts": e.attempts,
            },
        )
        return TrialFailure(trial_index=trial_index, kind=e.kind, reason=e.message)

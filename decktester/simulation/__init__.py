from decktester.simulation.aggregate import aggregate
from decktester.simulation.opening_hand import (
    MulliganResolver,
    MulliganState,
    OpeningHand,
    draw_opening_hand,
)
from decktester.simulation.seeds import derive_seed
from decktester.simulation.session import run_testing_session
from decktester.simulation.shuffle import reshuffle, shuffle
from decktester.simulation.trial import run_trial, run_trial_safely
from decktester.simulation.turns import TurnSequence, step_turns
from decktester.simulation.validator import validate_config, validate_deck

__all__ = [
    "MulliganResolver",
    "MulliganState",
    "OpeningHand",
    "TurnSequence",
    "aggregate",
    "derive_seed",
    "draw_opening_hand",
    "reshuffle",
    "run_testing_session",
    "run_trial",
    "run_trial_safely",
    "shuffle",
    "step_turns",
    "validate_config",
    "validate_deck",
]

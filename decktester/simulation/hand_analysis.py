"""
Opening hand analysis.

Scores what an opening hand offers on turn one using only card categories.
Card text is never read.
"""

from collections.abc import Callable

from decktester.models.card import CardCategory
from decktester.models.simulation import Hand, HandAnalysis

# Hands holding this many units have little room for energy or trainers
CLOGGED_UNIT_COUNT = 5

# Hands holding this many energy cards are flooded
FLOODED_ENERGY_COUNT = 4

# A hand with this many problems counts as a dead draw.
# One lower than a text-aware check: missing draw support cannot be detected
DEAD_DRAW_PROBLEM_COUNT = 2

# Setup potential: points per basic unit, per energy (capped), and overall cap
SETUP_POINTS_PER_BASIC = 20
SETUP_POINTS_PER_ENERGY = 15
SETUP_ENERGY_POINTS_CAP = 30
SETUP_POTENTIAL_CAP = 100

# Estimated setup turn is clamped to this range
EARLIEST_SETUP_TURN = 1.0
LATEST_SETUP_TURN = 4.0

PROBLEM_NO_BASIC_UNIT = "No basic unit - mulligan required"
PROBLEM_NO_ENERGY = "No energy cards in opening hand"
PROBLEM_CLOGGED = "Hand clogged with unit cards"
PROBLEM_FLOODED = "Too many energy cards in opening hand"
PROBLEM_STRANDED_EVOLUTION = "Evolution cards without a basic unit"


def setup_potential(basics: int, energy: int) -> int:
    """Turn-one setup score from 0 to 100."""
    score = basics * SETUP_POINTS_PER_BASIC
    score += min(energy * SETUP_POINTS_PER_ENERGY, SETUP_ENERGY_POINTS_CAP)
    return min(score, SETUP_POTENTIAL_CAP)


def analyze_hand(hand: Hand) -> HandAnalysis:
    """Summarize a hand and list its problems."""
    basics = sum(1 for card in hand if card.category == CardCategory.BASIC_UNIT)
    units = sum(1 for card in hand if card.category.is_unit)
    energy = sum(1 for card in hand if card.category.is_energy)
    trainers = sum(1 for card in hand if card.category == CardCategory.TRAINER)

    problems: list[str] = []
    if basics == 0:
        problems.append(PROBLEM_NO_BASIC_UNIT)
    if energy == 0:
        problems.append(PROBLEM_NO_ENERGY)
    if units >= CLOGGED_UNIT_COUNT:
        problems.append(PROBLEM_CLOGGED)
    if energy >= FLOODED_ENERGY_COUNT:
        problems.append(PROBLEM_FLOODED)
    if units > 0 and basics == 0:
        problems.append(PROBLEM_STRANDED_EVOLUTION)

    return HandAnalysis(
        has_basic_unit=basics > 0,
        unit_count=units,
        energy_count=energy,
        trainer_count=trainers,
        setup_potential=setup_potential(basics, energy),
        problems=tuple(problems),
    )


def is_dead_draw(analysis: HandAnalysis) -> bool:
    return len(analysis.problems) >= DEAD_DRAW_PROBLEM_COUNT


def estimate_setup_turn(analysis: HandAnalysis, mulligan_count: int) -> float:
    """
    Rough turn by which the kept hand is set up.

    Starts at turn 1. Two or more energy shaves a quarter turn; a mulligan
    adds a turn, no energy adds half a turn, and a dead draw adds half a
    turn. The result is clamped to turns 1 through 4.
    """
    turns = EARLIEST_SETUP_TURN
    if analysis.energy_count >= 2:
        turns -= 0.25
    if mulligan_count > 0:
        turns += 1
    if analysis.energy_count == 0:
        turns += 0.5
    if is_dead_draw(analysis):
        turns += 0.5
    return max(EARLIEST_SETUP_TURN, min(LATEST_SETUP_TURN, turns))


# Named opening-hand combos reported as success rates
COMBO_CHECKS: dict[str, Callable[[HandAnalysis], bool]] = {
    "basic_and_energy": lambda a: a.has_basic_unit and a.energy_count > 0,
    "turn_one_trainer": lambda a: a.trainer_count > 0,
}

"""
Reduction of trial records into session statistics.

Only successful trials are counted. Denominators are always the number of
successful trials, never the number requested, so failed trials cannot
silently drag a probability down. Values are rounded to 4 decimal places;
with no successful trials every derived value is None.
"""

from collections import Counter
from collections.abc import Sequence

from decktester.models.simulation import (
    AggregateStats,
    CardProbability,
    SimulationConfig,
    TrialFailure,
    TrialResult,
)
from decktester.simulation.hand_analysis import COMBO_CHECKS, estimate_setup_turn, is_dead_draw

PRECISION = 4


def _rate(count: int, total: int) -> float | None:
    if total == 0:
        return None
    return round(count / total, PRECISION)


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), PRECISION)


def mulligan_distribution(trials: Sequence[TrialResult]) -> dict[int, float]:
    """Share of trials by mulligan count, keyed in ascending order."""
    counts = Counter(trial.mulligan_count for trial in trials)
    total = len(trials)
    return {n: round(counts[n] / total, PRECISION) for n in sorted(counts)}


def first_seen_turns(trial: TrialResult) -> dict[str, int]:
    """Turn each card id first appears in hand (0 = opening hand)."""
    first_seen = {card.card_id: 0 for card in trial.opening_hand}
    previous = len(trial.opening_hand)
    for turn, snapshot in enumerate(trial.turn_snapshots, start=1):
        for card in snapshot[previous:]:
            first_seen.setdefault(card.card_id, turn)
        previous = len(snapshot)
    return first_seen


def _tracked_cards(
    trials: Sequence[TrialResult],
    config: SimulationConfig,
    card_ids: Sequence[str] | None,
) -> list[str]:
    if config.tracked_cards is not None:
        return list(config.tracked_cards)
    if card_ids is not None:
        return list(card_ids)
    seen = {card.card_id for trial in trials for card in trial.final_hand}
    return sorted(seen)


def card_probabilities(
    trials: Sequence[TrialResult],
    cards: Sequence[str],
    turn_horizon: int,
) -> dict[str, CardProbability]:
    """
    Probability each card is in hand by each turn, 0 through turn_horizon.
    """
    first_seen = [first_seen_turns(trial) for trial in trials]
    total = len(trials)

    probabilities: dict[str, CardProbability] = {}
    for card_id in cards:
        turns_seen = [seen[card_id] for seen in first_seen if card_id in seen]
        by_turn = tuple(
            _rate(sum(1 for t in turns_seen if t <= turn), total)
            for turn in range(turn_horizon + 1)
        )
        probabilities[card_id] = CardProbability(
            card_id=card_id,
            by_turn=by_turn,
            average_first_turn=_mean(turns_seen),
        )
    return probabilities


def aggregate(
    trials: Sequence[TrialResult],
    config: SimulationConfig,
    failures: Sequence[TrialFailure] = (),
    card_ids: Sequence[str] | None = None,
) -> AggregateStats:
    """
    Compute session statistics.

    Args:
        trials: Successful trials
        config: Configuration the trials ran with
        failures: Failed trials (counted, never aggregated)
        card_ids: Cards to report when config.tracked_cards is None,
            normally every card in the deck

    Returns:
        AggregateStats over the successful trials
    """
    total = len(trials)
    analyses = [trial.analysis for trial in trials]

    return AggregateStats(
        requested_trials=config.number_of_hands,
        successful_trials=total,
        failed_trials=len(failures),
        mulligan_probability=_rate(sum(1 for t in trials if t.mulligan_count > 0), total),
        average_mulligans=_mean([t.mulligan_count for t in trials]),
        mulligan_distribution=mulligan_distribution(trials),
        average_setup_turn=_mean(
            [estimate_setup_turn(t.analysis, t.mulligan_count) for t in trials]
        ),
        deck_out_rate=_rate(sum(1 for t in trials if t.decked_out), total),
        energy_drought_rate=_rate(sum(1 for a in analyses if a.energy_count == 0), total),
        dead_draw_rate=_rate(sum(1 for a in analyses if is_dead_draw(a)), total),
        combo_success_rates={
            name: _rate(sum(1 for a in analyses if check(a)), total)
            for name, check in COMBO_CHECKS.items()
        },
        card_probabilities=card_probabilities(
            trials, _tracked_cards(trials, config, card_ids), config.turn_horizon
        ),
    )

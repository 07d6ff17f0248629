"""
Testing session runner.

Validates input once, dispatches every trial onto a bounded thread pool,
waits for all of them (the only join in the pipeline) and aggregates the
results. Trials share no mutable state, so no locking is needed and the
output is identical for any worker count.

Cancellation:
    Setting cancel_event stops dispatch immediately. Queued trials are
    cancelled, running trials are allowed to finish, and the session raises
    SimulationCancelledError. A partial session is never aggregated.
"""

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

from decktester.config import DECK_SIZE, settings
from decktester.models.deck import DeckComposition
from decktester.models.failure import SimulationCancelledError, SimulationFailureError
from decktester.models.simulation import (
    SimulationConfig,
    TestingSession,
    TrialFailure,
    TrialResult,
)
from decktester.simulation.aggregate import aggregate
from decktester.simulation.trial import run_trial_safely
from decktester.simulation.validator import validate_config, validate_deck

logger = logging.getLogger(__name__)

# How often the join loop checks for cancellation
CANCEL_POLL_SECONDS = 0.05


def default_worker_count() -> int:
    """Worker pool size from settings, falling back to the CPU count."""
    if settings.simulation_workers > 0:
        return settings.simulation_workers
    return os.cpu_count() or 1


def _dispatch(
    deck: DeckComposition,
    config: SimulationConfig,
    max_workers: int,
    cancel_event: threading.Event,
) -> list[TrialResult | TrialFailure]:
    futures: list[Future[TrialResult | TrialFailure]] = []

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="trial") as executor:
        for trial_index in range(config.number_of_hands):
            if cancel_event.is_set():
                break
            futures.append(executor.submit(run_trial_safely, deck, config, trial_index))

        pending = set(futures)
        while pending:
            if cancel_event.is_set():
                # Running trials finish; queued ones never start
                executor.shutdown(wait=True, cancel_futures=True)
                break
            _, pending = wait(pending, timeout=CANCEL_POLL_SECONDS)

    if len(futures) < config.number_of_hands or any(f.cancelled() for f in futures):
        completed = sum(1 for f in futures if f.done() and not f.cancelled())
        raise SimulationCancelledError(completed=completed, requested=config.number_of_hands)

    # Futures are in trial-index order regardless of completion order
    return [future.result() for future in futures]


def run_testing_session(
    deck: DeckComposition,
    config: SimulationConfig,
    cancel_event: threading.Event | None = None,
    max_workers: int | None = None,
    deck_size: int = DECK_SIZE,
) -> TestingSession:
    """
    Simulate config.number_of_hands trials of a deck.

    Args:
        deck: The deck to test
        config: Session parameters
        cancel_event: Set by the caller to cancel the session
        max_workers: Worker pool size (default: settings or CPU count)
        deck_size: Exact number of cards the deck must hold

    Returns:
        The finished TestingSession

    Raises:
        InvalidConfigurationError: Parameters out of range (nothing was run)
        DeckValidationError: The deck cannot be simulated (nothing was run)
        SimulationCancelledError: cancel_event was set before all trials finished
        SimulationFailureError: Too many trials failed to report statistics
    """
    validate_config(config, deck_size=deck_size)
    validate_deck(deck, deck_size=deck_size)

    cancel_event = cancel_event or threading.Event()
    workers = max_workers or default_worker_count()

    logger.info(
        "SIMULATION_STARTED",
        extra={
            "deck_id": deck.deck_id,
            "number_of_hands": config.number_of_hands,
            "workers": workers,
        },
    )

    try:
        outcomes = _dispatch(deck, config, workers, cancel_event)
    except SimulationCancelledError as e:
        logger.warning(
            "SIMULATION_CANCELLED",
            extra={"deck_id": deck.deck_id, "completed": e.completed, "requested": e.requested},
        )
        raise

    trials = tuple(o for o in outcomes if isinstance(o, TrialResult))
    failures = tuple(o for o in outcomes if isinstance(o, TrialFailure))

    failed_fraction = len(failures) / config.number_of_hands
    if failures and failed_fraction >= settings.max_failed_trial_fraction:
        logger.error(
            "SIMULATION_FAILED",
            extra={
                "deck_id": deck.deck_id,
                "failed": len(failures),
                "requested": config.number_of_hands,
                "seed_base": config.random_seed_base,
            },
        )
        raise SimulationFailureError(failed=len(failures), requested=config.number_of_hands)

    stats = aggregate(trials, config, failures, card_ids=deck.card_ids())

    logger.info(
        "SIMULATION_COMPLETE",
        extra={
            "deck_id": deck.deck_id,
            "successful": stats.successful_trials,
            "failed": stats.failed_trials,
        },
    )

    return TestingSession(
        config=config,
        trials=trials,
        failures=failures,
        aggregate_stats=stats,
    )

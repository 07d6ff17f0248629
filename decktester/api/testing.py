"""
Deck testing API endpoint.

Simulates opening hands and early turns of a stored deck and reports how
often the deck mulligans, decks out, and draws each card by each turn.
"""

import asyncio
import secrets
import threading
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from decktester.config import DEFAULT_HANDS, DEFAULT_TURN_HORIZON, MAX_TURN_HORIZON, settings
from decktester.db import load_deck_composition
from decktester.db.database import get_session
from decktester.models.deck import DeckComposition
from decktester.models.simulation import Hand, SimulationConfig, TestingSession
from decktester.simulation.session import run_testing_session

router = APIRouter(prefix="/deck-builder", tags=["deck-testing"])


class DeckTestRequest(BaseModel):
    """
    Request to test a deck.

    Ranges are checked by the simulator so that every configuration error
    is reported the same way (400 with a failure envelope).
    """

    number_of_hands: int = Field(default=DEFAULT_HANDS, description="Trials to run (1-100)")
    turn_horizon: int = Field(
        default=DEFAULT_TURN_HORIZON, description=f"Turns to draw for (0-{MAX_TURN_HORIZON})"
    )
    prize_count: int = Field(default=0, description="Cards set aside after the opening hand")
    seed: int | None = Field(default=None, description="Base seed for reproducible results")
    tracked_cards: list[str] | None = Field(
        default=None, description="Card ids to report (default: every card in the deck)"
    )


class SimulationConfigResponse(BaseModel):
    """Configuration a session ran with."""

    number_of_hands: int
    hand_size: int
    turn_horizon: int
    mulligan_rule: str
    random_seed_base: int
    max_mulligan_attempts: int
    prize_count: int
    tracked_cards: list[str] | None = None


class TrialResponse(BaseModel):
    """One simulated game opening. Hands are lists of card ids."""

    trial_index: int
    mulligan_count: int
    decked_out: bool
    opening_hand: list[str]
    turn_hands: list[list[str]]
    prizes: list[str] = Field(default_factory=list)
    energy_count: int
    setup_potential: int
    problems: list[str] = Field(default_factory=list)


class TrialFailureResponse(BaseModel):
    """A trial excluded from the statistics."""

    trial_index: int
    kind: str
    reason: str


class CardProbabilityResponse(BaseModel):
    """Probability a card is in hand by each turn (index 0 = opening hand)."""

    card_id: str
    by_turn: list[float | None]
    average_first_turn: float | None = None


class AggregateStatsResponse(BaseModel):
    """Statistics over successful trials. None when no trial succeeded."""

    requested_trials: int
    successful_trials: int
    failed_trials: int
    mulligan_probability: float | None = None
    average_mulligans: float | None = None
    mulligan_distribution: dict[int, float] = Field(default_factory=dict)
    average_setup_turn: float | None = None
    deck_out_rate: float | None = None
    energy_drought_rate: float | None = None
    dead_draw_rate: float | None = None
    combo_success_rates: dict[str, float | None] = Field(default_factory=dict)
    card_probabilities: dict[str, CardProbabilityResponse] = Field(default_factory=dict)


class TestingSessionResponse(BaseModel):
    """A finished testing session."""

    config: SimulationConfigResponse
    trials: list[TrialResponse]
    failed_trials: list[TrialFailureResponse]
    aggregate_stats: AggregateStatsResponse


class DeckTestResponse(BaseModel):
    """Response wrapper for the deck test endpoint."""

    testing_session: TestingSessionResponse


def _card_ids(hand: Hand) -> list[str]:
    return [card.card_id for card in hand]


def session_to_response(session: TestingSession) -> TestingSessionResponse:
    """Flatten a TestingSession into its response model."""
    config = session.config
    stats = session.aggregate_stats

    return TestingSessionResponse(
        config=SimulationConfigResponse(
            number_of_hands=config.number_of_hands,
            hand_size=config.hand_size,
            turn_horizon=config.turn_horizon,
            mulligan_rule=config.mulligan_rule_name,
            random_seed_base=config.random_seed_base,
            max_mulligan_attempts=config.max_mulligan_attempts,
            prize_count=config.prize_count,
            tracked_cards=list(config.tracked_cards) if config.tracked_cards is not None else None,
        ),
        trials=[
            TrialResponse(
                trial_index=t.trial_index,
                mulligan_count=t.mulligan_count,
                decked_out=t.decked_out,
                opening_hand=_card_ids(t.opening_hand),
                turn_hands=[_card_ids(hand) for hand in t.turn_snapshots],
                prizes=_card_ids(t.prizes),
                energy_count=t.analysis.energy_count,
                setup_potential=t.analysis.setup_potential,
                problems=list(t.analysis.problems),
            )
            for t in session.trials
        ],
        failed_trials=[
            TrialFailureResponse(trial_index=f.trial_index, kind=f.kind.value, reason=f.reason)
            for f in session.failures
        ],
        aggregate_stats=AggregateStatsResponse(
            requested_trials=stats.requested_trials,
            successful_trials=stats.successful_trials,
            failed_trials=stats.failed_trials,
            mulligan_probability=stats.mulligan_probability,
            average_mulligans=stats.average_mulligans,
            mulligan_distribution=stats.mulligan_distribution,
            average_setup_turn=stats.average_setup_turn,
            deck_out_rate=stats.deck_out_rate,
            energy_drought_rate=stats.energy_drought_rate,
            dead_draw_rate=stats.dead_draw_rate,
            combo_success_rates=stats.combo_success_rates,
            card_probabilities={
                card_id: CardProbabilityResponse(
                    card_id=p.card_id,
                    by_turn=list(p.by_turn),
                    average_first_turn=p.average_first_turn,
                )
                for card_id, p in stats.card_probabilities.items()
            },
        ),
    )


async def run_session_with_timeout(
    deck: DeckComposition,
    config: SimulationConfig,
    timeout: float,
) -> TestingSession:
    """
    Run a testing session off the event loop, cancelling it on timeout.

    On timeout the cancel event stops dispatch; the session then raises
    SimulationCancelledError once its running trials have finished.
    """
    cancel_event = threading.Event()
    task = asyncio.create_task(
        asyncio.to_thread(run_testing_session, deck, config, cancel_event)
    )

    done, _ = await asyncio.wait({task}, timeout=timeout)
    if not done:
        cancel_event.set()

    return await task


@router.post("/{user_id}/{deck_id}/test", response_model=DeckTestResponse)
async def run_deck_test(
    user_id: str,
    deck_id: str,
    request: DeckTestRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckTestResponse:
    """
    Test a deck by simulating opening hands and early turns.

    The deck must belong to user_id, be public, or be shared with user_id.
    Without a seed a random one is chosen; it is returned in the session
    config so the run can be reproduced.

    Failures:
    - 404: deck not found
    - 403: deck not accessible to this user
    - 400: invalid settings or a deck that cannot be simulated
    - 500: every trial failed
    - 503: simulation timed out
    """
    deck = await load_deck_composition(session, deck_id, user_id)

    config = SimulationConfig(
        number_of_hands=request.number_of_hands,
        turn_horizon=request.turn_horizon,
        prize_count=request.prize_count,
        random_seed_base=request.seed if request.seed is not None else secrets.randbits(32),
        tracked_cards=tuple(request.tracked_cards) if request.tracked_cards is not None else None,
    )

    testing_session = await run_session_with_timeout(
        deck, config, timeout=settings.simulation_timeout_seconds
    )

    return DeckTestResponse(testing_session=session_to_response(testing_session))

"""Tests for the testing session runner."""

import logging
import threading
import time
from unittest.mock import patch

import pytest

from decktester.config import settings
from decktester.models.card import CardCategory, CardEntry
from decktester.models.deck import DeckComposition
from decktester.models.failure import (
    EmptyCategoryError,
    FailureKind,
    InvalidConfigurationError,
    SimulationCancelledError,
    SimulationFailureError,
    WrongDeckSizeError,
)
from decktester.models.simulation import Hand, SimulationConfig
from decktester.simulation.session import default_worker_count, run_testing_session


def never_keep(hand: Hand) -> bool:  # noqa: ARG001
    return False


def holds_star(hand: Hand) -> bool:
    return any(card.card_id == "star" for card in hand)


@pytest.fixture
def star_deck() -> DeckComposition:
    """A deck with one copy of 'star', so most hands lack it."""
    return DeckComposition(
        entries=(
            CardEntry("basic", CardCategory.BASIC_UNIT, 20),
            CardEntry("trainer", CardCategory.TRAINER, 39),
            CardEntry("star", CardCategory.TRAINER, 1),
        ),
        deck_id="star-deck",
    )


class TestRunTestingSession:
    def test_runs_requested_trials(self, energy_deck: DeckComposition) -> None:
        session = run_testing_session(energy_deck, SimulationConfig(number_of_hands=25))

        assert len(session.trials) == 25
        assert session.failures == ()
        assert [t.trial_index for t in session.trials] == list(range(25))
        assert session.aggregate_stats.successful_trials == 25

    def test_reproducible_across_worker_counts(self, energy_deck: DeckComposition) -> None:
        config = SimulationConfig(number_of_hands=40, random_seed_base=1234)

        single = run_testing_session(energy_deck, config, max_workers=1)
        pooled = run_testing_session(energy_deck, config, max_workers=8)

        assert single == pooled

    def test_different_seeds_differ(self, energy_deck: DeckComposition) -> None:
        first = run_testing_session(energy_deck, SimulationConfig(random_seed_base=1))
        second = run_testing_session(energy_deck, SimulationConfig(random_seed_base=2))

        assert first.trials != second.trials

    def test_reports_every_card_in_deck(self, energy_deck: DeckComposition) -> None:
        session = run_testing_session(energy_deck, SimulationConfig(turn_horizon=3))

        probabilities = session.aggregate_stats.card_probabilities
        assert list(probabilities) == energy_deck.card_ids()
        assert all(len(p.by_turn) == 4 for p in probabilities.values())

    def test_all_basic_deck_never_mulligans(self, all_basic_deck: DeckComposition) -> None:
        session = run_testing_session(all_basic_deck, SimulationConfig(number_of_hands=100))

        assert session.aggregate_stats.mulligan_probability == 0.0
        assert session.aggregate_stats.average_mulligans == 0.0
        assert session.aggregate_stats.mulligan_distribution == {0: 1.0}

    def test_deck_out_at_long_horizon(self, energy_deck: DeckComposition) -> None:
        session = run_testing_session(energy_deck, SimulationConfig(turn_horizon=54))

        assert session.aggregate_stats.deck_out_rate == 1.0

    def test_no_deck_out_when_last_card_drawn(self, energy_deck: DeckComposition) -> None:
        session = run_testing_session(energy_deck, SimulationConfig(turn_horizon=53))

        assert session.aggregate_stats.deck_out_rate == 0.0


class TestValidationBeforeDispatch:
    @pytest.mark.parametrize("hands", [0, 101])
    def test_invalid_hand_count(self, energy_deck: DeckComposition, hands: int) -> None:
        with patch("decktester.simulation.session.run_trial_safely") as mock_trial:
            with pytest.raises(InvalidConfigurationError):
                run_testing_session(energy_deck, SimulationConfig(number_of_hands=hands))

        mock_trial.assert_not_called()

    def test_no_basic_deck(self, no_basic_deck: DeckComposition) -> None:
        with patch("decktester.simulation.session.run_trial_safely") as mock_trial:
            with pytest.raises(EmptyCategoryError):
                run_testing_session(no_basic_deck, SimulationConfig())

        mock_trial.assert_not_called()

    def test_wrong_size(self, build_deck) -> None:
        with pytest.raises(WrongDeckSizeError):
            run_testing_session(build_deck(basic_unit=20, trainer=20), SimulationConfig())


class TestTrialFailures:
    def test_partial_failures_are_counted_not_aggregated(self, star_deck: DeckComposition) -> None:
        config = SimulationConfig(
            number_of_hands=100,
            mulligan_rule=holds_star,
            max_mulligan_attempts=1,
            random_seed_base=77,
        )

        session = run_testing_session(star_deck, config)
        stats = session.aggregate_stats

        assert stats.successful_trials + stats.failed_trials == 100
        assert stats.failed_trials > 0
        assert stats.successful_trials > 0
        assert len(session.failures) == stats.failed_trials
        # Only trials that kept 'star' were aggregated
        assert stats.card_probabilities["star"].by_turn[0] == 1.0
        assert all(f.kind == FailureKind.MULLIGAN_LOOP_EXCEEDED for f in session.failures)

    def test_all_trials_failing_raises(self, energy_deck: DeckComposition) -> None:
        config = SimulationConfig(
            number_of_hands=5, mulligan_rule=never_keep, max_mulligan_attempts=2
        )

        with pytest.raises(SimulationFailureError) as exc_info:
            run_testing_session(energy_deck, config)

        assert exc_info.value.failed == 5
        assert exc_info.value.requested == 5
        assert exc_info.value.status_code == 500

    def test_failure_threshold_from_settings(
        self, star_deck: DeckComposition, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "max_failed_trial_fraction", 0.05)
        config = SimulationConfig(
            number_of_hands=100,
            mulligan_rule=holds_star,
            max_mulligan_attempts=1,
            random_seed_base=77,
        )

        with pytest.raises(SimulationFailureError):
            run_testing_session(star_deck, config)


class TestCancellation:
    def test_cancelled_before_start(self, energy_deck: DeckComposition) -> None:
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(SimulationCancelledError) as exc_info:
            run_testing_session(energy_deck, SimulationConfig(), cancel_event=cancel_event)

        assert exc_info.value.completed == 0
        assert exc_info.value.status_code == 503

    def test_cancelled_mid_run(self, energy_deck: DeckComposition) -> None:
        """Setting the event while trials run stops the session."""
        cancel_event = threading.Event()

        def slow_rule(hand: Hand) -> bool:  # noqa: ARG001
            cancel_event.set()
            time.sleep(0.2)
            return True

        config = SimulationConfig(number_of_hands=20, mulligan_rule=slow_rule)

        with pytest.raises(SimulationCancelledError) as exc_info:
            run_testing_session(energy_deck, config, cancel_event=cancel_event, max_workers=1)

        assert exc_info.value.completed < 20
        assert exc_info.value.requested == 20


class TestLogging:
    def test_logs_start_and_completion(
        self, energy_deck: DeckComposition, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="decktester.simulation.session")

        run_testing_session(energy_deck, SimulationConfig(number_of_hands=3))

        messages = [r.getMessage() for r in caplog.records]
        assert "SIMULATION_STARTED" in messages
        assert "SIMULATION_COMPLETE" in messages
        complete = next(r for r in caplog.records if r.getMessage() == "SIMULATION_COMPLETE")
        assert complete.successful == 3  # type: ignore[attr-defined]

    def test_logs_trial_failures(
        self, energy_deck: DeckComposition, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="decktester.simulation.trial")
        config = SimulationConfig(
            number_of_hands=2, mulligan_rule=never_keep, max_mulligan_attempts=1
        )

        with pytest.raises(SimulationFailureError):
            run_testing_session(energy_deck, config)

        assert [r.getMessage() for r in caplog.records].count("TRIAL_FAILED") == 2


class TestDefaultWorkerCount:
    def test_uses_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "simulation_workers", 3)

        assert default_worker_count() == 3

    def test_falls_back_to_cpu_count(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "simulation_workers", 0)

        assert default_worker_count() >= 1

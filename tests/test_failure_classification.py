"""
Tests for failure classification.

Every known failure maps to one FailureKind and one HTTP status, and the
response envelope never leaks internal state.
"""

import pytest

from decktester.models.failure import (
    ApiResponse,
    DeckNotFoundError,
    DeckValidationError,
    EmptyCategoryError,
    FailureKind,
    InvalidConfigurationError,
    InvalidDeckError,
    KnownError,
    MulliganLoopExceededError,
    OutcomeType,
    SimulationCancelledError,
    SimulationFailureError,
    UnauthorizedAccessError,
    WrongDeckSizeError,
)


class TestKnownErrorStatusCodes:
    @pytest.mark.parametrize(
        ("error", "kind", "status_code"),
        [
            (
                InvalidConfigurationError("number_of_hands", 0, "1-100"),
                FailureKind.INVALID_CONFIGURATION,
                400,
            ),
            (InvalidDeckError("x", "bad"), FailureKind.INVALID_DECK, 400),
            (WrongDeckSizeError(60, 59), FailureKind.WRONG_DECK_SIZE, 400),
            (EmptyCategoryError("basic_unit"), FailureKind.EMPTY_CATEGORY, 400),
            (DeckNotFoundError("d1"), FailureKind.DECK_NOT_FOUND, 404),
            (UnauthorizedAccessError("d1"), FailureKind.UNAUTHORIZED_ACCESS, 403),
            (MulliganLoopExceededError(50), FailureKind.MULLIGAN_LOOP_EXCEEDED, 500),
            (SimulationFailureError(10, 10), FailureKind.SIMULATION_FAILURE, 500),
            (SimulationCancelledError(3, 10), FailureKind.SIMULATION_CANCELLED, 503),
        ],
    )
    def test_kind_and_status(self, error: KnownError, kind: FailureKind, status_code: int) -> None:
        assert error.kind == kind
        assert error.status_code == status_code
        assert isinstance(error, KnownError)

    def test_deck_errors_share_base(self) -> None:
        for error in (
            InvalidDeckError("x", "bad"),
            WrongDeckSizeError(60, 40),
            EmptyCategoryError("basic_unit"),
        ):
            assert isinstance(error, DeckValidationError)


class TestMessages:
    def test_wrong_deck_size_message(self) -> None:
        error = WrongDeckSizeError(60, 45)

        assert "60" in error.message
        assert "45" in error.message

    def test_empty_category_message_is_readable(self) -> None:
        error = EmptyCategoryError("basic_unit")

        assert error.message == "Deck contains no basic unit cards."

    def test_mulligan_message(self) -> None:
        assert MulliganLoopExceededError(50).message == (
            "No playable opening hand after 50 attempts."
        )

    def test_resource_messages(self) -> None:
        assert DeckNotFoundError("d1").message == "Deck not found"
        assert UnauthorizedAccessError("d1").message == "Unauthorized access to deck"

    def test_invalid_configuration_names_parameter(self) -> None:
        error = InvalidConfigurationError("turn_horizon", -1, "a non-negative integer")

        assert "turn_horizon" in error.message
        assert error.detail == "Expected a non-negative integer"


class TestApiResponse:
    def test_known_failure_envelope(self) -> None:
        response = SimulationCancelledError(3, 10).to_response()

        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.data is None
        assert response.failure is not None
        assert response.failure.kind == FailureKind.SIMULATION_CANCELLED
        assert response.failure.detail == "3 of 10 trials completed"

    def test_success_envelope(self) -> None:
        response = ApiResponse.success({"ok": True})

        assert response.outcome == OutcomeType.SUCCESS
        assert response.failure is None
        assert response.data == {"ok": True}

    def test_unknown_failure_message_is_fixed(self) -> None:
        response = ApiResponse.unknown_failure(detail="ValueError")

        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.UNKNOWN
        assert response.failure.message == (
            "The simulation failed for an unknown reason. Try again."
        )
        assert response.failure.detail == "ValueError"

    def test_serializes_kind_as_string(self) -> None:
        data = DeckNotFoundError("d1").to_response().model_dump(mode="json")

        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "deck_not_found"

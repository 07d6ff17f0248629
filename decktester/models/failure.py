"""
Failure classification for the deck tester.

Every user-visible failure is a KnownError carrying a FailureKind, a
human-readable message and the HTTP status it maps to. The API layer turns
these into the ApiResponse envelope; nothing else reaches the client.

Error categories:
- Configuration: bad session parameters, raised before any trial runs
- Structural deck: the deck can never be simulated, raised before any trial runs
- Per-trial: one trial could not finish; recorded, never raised to the caller
- Session: the session as a whole produced nothing meaningful

Seeds and internal state go to logs, never into a FailureDetail.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_CONFIGURATION = "invalid_configuration"
    INVALID_DECK = "invalid_deck"

    # Structural deck failures
    WRONG_DECK_SIZE = "wrong_deck_size"
    EMPTY_CATEGORY = "empty_category"

    # Resource failures
    DECK_NOT_FOUND = "deck_not_found"
    UNAUTHORIZED_ACCESS = "unauthorized_access"

    # Per-trial failures
    MULLIGAN_LOOP_EXCEEDED = "mulligan_loop_exceeded"

    # Session failures
    SIMULATION_FAILURE = "simulation_failure"
    SIMULATION_CANCELLED = "simulation_cancelled"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by every endpoint's failure path."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse[Any]":
        """
        Create an unknown failure response.

        The message is fixed. Only the exception type may appear in detail.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="The simulation failed for an unknown reason. Try again.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class InvalidConfigurationError(KnownError):
    """Raised when session parameters are out of range."""

    def __init__(self, parameter: str, value: Any, expected: str):
        self.parameter = parameter
        self.value = value
        super().__init__(
            kind=FailureKind.INVALID_CONFIGURATION,
            message=f"Invalid simulation setting '{parameter}': {value!r}",
            detail=f"Expected {expected}",
            suggestion="Adjust the request and try again.",
            status_code=400,
        )


# =============================================================================
# STRUCTURAL DECK ERRORS
# =============================================================================


class DeckValidationError(KnownError):
    """Base class for decks that can never be simulated."""


class InvalidDeckError(DeckValidationError):
    """Raised for a malformed deck entry."""

    def __init__(self, card_id: str, reason: str):
        self.card_id = card_id
        self.reason = reason
        super().__init__(
            kind=FailureKind.INVALID_DECK,
            message=f"Deck entry '{card_id}' is invalid: {reason}",
            suggestion="Fix the deck list in the deck builder.",
            status_code=400,
        )


class WrongDeckSizeError(DeckValidationError):
    """Raised when the deck does not hold exactly the expected number of cards."""

    def __init__(self, expected_size: int, actual_size: int):
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__(
            kind=FailureKind.WRONG_DECK_SIZE,
            message=(
                f"Deck must contain exactly {expected_size} cards to be tested. "
                f"It contains {actual_size}."
            ),
            suggestion="Add or remove cards until the deck is complete.",
            status_code=400,
        )


class EmptyCategoryError(DeckValidationError):
    """
    Raised when a category the mulligan rule needs is missing.

    A deck with no basic units would mulligan forever, so it is rejected
    up front rather than discovered through the mulligan bound.
    """

    def __init__(self, category: str):
        self.category = category
        super().__init__(
            kind=FailureKind.EMPTY_CATEGORY,
            message=f"Deck contains no {category.replace('_', ' ')} cards.",
            detail="Every opening hand would be a mulligan.",
            suggestion=f"Add at least one {category.replace('_', ' ')} card.",
            status_code=400,
        )


# =============================================================================
# PER-TRIAL ERRORS
# =============================================================================


class MulliganLoopExceededError(KnownError):
    """
    Raised when no acceptable opening hand was drawn within the attempt bound.

    Isolated to a single trial. The session records it and moves on.
    """

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            kind=FailureKind.MULLIGAN_LOOP_EXCEEDED,
            message=f"No playable opening hand after {attempts} attempts.",
            status_code=500,
        )


# =============================================================================
# SESSION ERRORS
# =============================================================================


class SimulationFailureError(KnownError):
    """Raised when too many trials failed for the session to mean anything."""

    def __init__(self, failed: int, requested: int):
        self.failed = failed
        self.requested = requested
        super().__init__(
            kind=FailureKind.SIMULATION_FAILURE,
            message="Deck testing failed: too many trials could not produce an opening hand.",
            detail=f"{failed} of {requested} trials failed",
            suggestion="Check that the deck can produce a legal opening hand.",
            status_code=500,
        )


class SimulationCancelledError(KnownError):
    """Raised when a session is cancelled before all trials completed."""

    def __init__(self, completed: int, requested: int):
        self.completed = completed
        self.requested = requested
        super().__init__(
            kind=FailureKind.SIMULATION_CANCELLED,
            message="Deck testing was cancelled before it finished.",
            detail=f"{completed} of {requested} trials completed",
            suggestion="Try again with fewer hands.",
            status_code=503,
        )


# =============================================================================
# RESOURCE ERRORS
# =============================================================================


class DeckNotFoundError(KnownError):
    """Raised when no deck exists with the requested id."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(
            kind=FailureKind.DECK_NOT_FOUND,
            message="Deck not found",
            detail=f"No deck with id '{deck_id}'",
            status_code=404,
        )


class UnauthorizedAccessError(KnownError):
    """Raised when the requesting user may not read the deck."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(
            kind=FailureKind.UNAUTHORIZED_ACCESS,
            message="Unauthorized access to deck",
            suggestion="Ask the deck owner to share the deck with you.",
            status_code=403,
        )

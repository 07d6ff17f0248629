from decktester.models.card import CardCategory, CardEntry, CardInstance
from decktester.models.deck import DeckComposition, ShuffledDeck
from decktester.models.failure import (
    ApiResponse,
    DeckNotFoundError,
    DeckValidationError,
    EmptyCategoryError,
    FailureDetail,
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
from decktester.models.simulation import (
    AggregateStats,
    CardProbability,
    Hand,
    HandAnalysis,
    SimulationConfig,
    TestingSession,
    TrialFailure,
    TrialResult,
    has_basic_unit,
    single_draw,
)

__all__ = [
    "AggregateStats",
    "ApiResponse",
    "CardCategory",
    "CardEntry",
    "CardInstance",
    "CardProbability",
    "DeckComposition",
    "DeckNotFoundError",
    "DeckValidationError",
    "EmptyCategoryError",
    "FailureDetail",
    "FailureKind",
    "Hand",
    "HandAnalysis",
    "InvalidConfigurationError",
    "InvalidDeckError",
    "KnownError",
    "MulliganLoopExceededError",
    "OutcomeType",
    "ShuffledDeck",
    "SimulationCancelledError",
    "SimulationConfig",
    "SimulationFailureError",
    "TestingSession",
    "TrialFailure",
    "TrialResult",
    "UnauthorizedAccessError",
    "WrongDeckSizeError",
    "has_basic_unit",
    "single_draw",
]

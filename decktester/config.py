from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DeckTester"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/decktester"

    # Worker pool size for trial dispatch (0 = one worker per CPU)
    simulation_workers: int = 0

    # Sessions still running after this long are cancelled
    simulation_timeout_seconds: float = 30.0

    # A session fails outright once this fraction of its trials has failed.
    # Default: 1.0 (only an all-failed session is rejected)
    max_failed_trial_fraction: float = 1.0


settings = Settings()


# =============================================================================
# GAME CONSTANTS
# =============================================================================

DECK_SIZE = 60
HAND_SIZE = 7

# Bounds on trials per session, enforced before any trial is dispatched
MIN_HANDS = 1
MAX_HANDS = 100
DEFAULT_HANDS = 10

DEFAULT_TURN_HORIZON = 5

# Longer horizons only repeat the final hand once the deck is empty
MAX_TURN_HORIZON = DECK_SIZE

# Backstop for mulligan rules no hand can satisfy
MAX_MULLIGAN_ATTEMPTS = 50

MAX_PRIZE_COUNT = 6

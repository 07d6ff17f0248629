from decktester.api.health import router as health_router
from decktester.api.testing import router as testing_router

__all__ = [
    "health_router",
    "testing_router",
]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from decktester.api import health_router, testing_router
from decktester.config import settings
from decktester.db.database import init_db
from decktester.models.failure import ApiResponse, KnownError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("decktester"),
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(testing_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    """Classified failures keep their status code and carry the failure envelope."""
    logger.info(
        "KNOWN_FAILURE",
        extra={"path": request.url.path, "kind": exc.kind.value, "detail": exc.detail},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unclassified becomes an unknown failure; details stay in the log."""
    logger.exception("UNKNOWN_FAILURE", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiResponse.unknown_failure(detail=type(exc).__name__).model_dump(mode="json"),
    )

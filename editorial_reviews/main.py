"""editorial_reviews FastAPI application entry point.

Wires the review-site adapters, the crawl-cache store and the
:class:`ReviewService` together, configures structured logging and mounts
the API routes.  ``build_service`` is also used by the CLI, which runs
without the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from editorial_reviews import __version__
from editorial_reviews.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from editorial_reviews.api.routes import router as api_router
from editorial_reviews.config.loader import enabled_sources, load_config
from editorial_reviews.config.settings import Settings
from editorial_reviews.interfaces.kv_store import IKeyValueStore
from editorial_reviews.interfaces.review_source import IReviewSource
from editorial_reviews.providers.review_sites import (
    AllMusicReviewSource,
    NorthernTransmissionsReviewSource,
    PitchforkReviewSource,
    TheLineOfBestFitReviewSource,
)
from editorial_reviews.providers.store import MemoryKeyValueStore, SQLiteKeyValueStore
from editorial_reviews.services.review_service import ReviewService
from editorial_reviews.utils.errors import ConfigurationError
from editorial_reviews.utils.logging import configure_logging, get_logger

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=config["logging"]["level"],
    json_output=(config["app"]["env"] == "production"),
)

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component builders
# ---------------------------------------------------------------------------


def build_store(app_config: dict) -> IKeyValueStore:
    """Select the crawl-cache backend named by ``store.backend``."""
    store_config = app_config["store"]
    backend = str(store_config["backend"]).lower()
    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "sqlite":
        return SQLiteKeyValueStore(db_path=store_config["db_path"])
    raise ConfigurationError(message=f"Unknown store backend '{store_config['backend']}'")


def build_sources(
    app_config: dict,
    http_client: httpx.AsyncClient,
    store: IKeyValueStore,
) -> list[IReviewSource]:
    """Instantiate every enabled review source, sharing one HTTP client."""
    user_agent = app_config["http"]["user_agent"]
    crawl = app_config["crawl"]
    factories = {
        "allmusic": lambda: AllMusicReviewSource(http_client, user_agent=user_agent),
        "pitchfork": lambda: PitchforkReviewSource(http_client, user_agent=user_agent),
        "northern_transmissions": lambda: NorthernTransmissionsReviewSource(
            http_client, user_agent=user_agent
        ),
        "thelineofbestfit": lambda: TheLineOfBestFitReviewSource(
            http_client,
            store,
            user_agent=user_agent,
            batch_size=int(crawl["batch_size"]),
            max_pages=int(crawl["max_pages"]),
        ),
    }
    return [factories[name]() for name in enabled_sources(app_config)]


def build_service(
    app_config: dict,
    http_client: httpx.AsyncClient,
    store: IKeyValueStore | None = None,
) -> ReviewService:
    store = store or build_store(app_config)
    sources = build_sources(app_config, http_client, store)
    return ReviewService(sources)


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build the review service on startup unless one was injected; close the client on shutdown."""
    http_client: httpx.AsyncClient | None = None
    if getattr(application.state, "review_service", None) is None:
        http_client = httpx.AsyncClient(timeout=float(config["http"]["timeout"]))
        application.state.review_service = build_service(config, http_client)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=config["app"]["env"],
        sources=application.state.review_service.list_sources(),
    )

    yield

    if http_client is not None:
        await http_client.aclose()
        _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(review_service: ReviewService | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Args:
        review_service: Pre-built service to serve instead of one built
            from the loaded configuration at startup.
    """
    application = FastAPI(
        title="editorial-reviews API",
        version=__version__,
        description=(
            "Locate an album's editorial review on AllMusic, Pitchfork, "
            "Northern Transmissions or The Line of Best Fit and return a "
            "normalized rating, excerpt, reviewer and date."
        ),
        lifespan=_lifespan,
    )
    application.state.review_service = review_service

    # -- Middleware (last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "editorial_reviews.main:app",
        host=config["app"]["host"],
        port=int(config["app"]["port"]),
        reload=(config["app"]["env"] == "development"),
    )

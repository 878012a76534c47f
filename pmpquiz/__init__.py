"""
PMP Quiz Backend

This package serves a fixed set of multiple-choice exam questions one at a
time, records each answer, and reports a final score.

The platform is built from:
1. A question catalog loaded and shuffled once at startup
2. A session store (SQL or in-memory) keeping per-token progress and answers
3. A quiz service driving each session through the catalog
4. A JSON API exposing start / question / answer / summary actions
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from pmpquiz.config import Settings, settings as default_settings
from pmpquiz.common.error_handling import CatalogLoadError, log_error
from pmpquiz.common.logger import app_logger, configure_logger, APP_LOGGER_NAME
from pmpquiz.database.init_db import close_database, get_session_factory, initialize_database
from pmpquiz.domain.questions import QuestionCatalog
from pmpquiz.domain.sessions import MemorySessionStore, SessionStore, SqlSessionStore
from pmpquiz.quiz.service import QuizService

__version__ = "0.1.0"

logger = app_logger.getChild("app")


async def build_session_store(settings: Settings) -> SessionStore:
    """
    Create the session store selected by ``SESSION_BACKEND``.

    Args:
        settings: Application settings

    Returns:
        A ready-to-use session store
    """
    if settings.SESSION_BACKEND == "memory":
        logger.info("Using in-memory session store")
        return MemorySessionStore()

    await initialize_database(
        database_url=settings.DATABASE_URL,
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )
    logger.info("Using SQL session store")
    return SqlSessionStore(get_session_factory())


def load_catalog(settings: Settings) -> QuestionCatalog:
    """
    Load the question catalog named by the settings.

    Raises:
        CatalogLoadError: If the questions cannot be loaded; the process cannot serve without them
    """
    try:
        return QuestionCatalog.load(
            settings.QUESTIONS_FILE,
            shuffle=settings.SHUFFLE_QUESTIONS,
            seed=settings.SHUFFLE_SEED,
        )
    except CatalogLoadError as e:
        log_error(e, log=logger)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI application lifespan context manager.

    Loads the catalog, opens the session store and builds the quiz service
    on startup; closes the store and database on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info("Application startup sequence initiated.")

    catalog = app.state.catalog
    if catalog is None:
        catalog = load_catalog(settings)

    store = app.state.session_store
    owns_database = False
    if store is None:
        store = await build_session_store(settings)
        owns_database = settings.SESSION_BACKEND == "sql"

    app.state.catalog = catalog
    app.state.session_store = store
    app.state.quiz_service = QuizService(catalog, store)
    logger.info(f"Application startup complete with {len(catalog)} questions")

    yield

    logger.info("Application shutdown sequence initiated.")
    await store.close()
    if owns_database:
        await close_database()
    logger.info("Application shutdown sequence complete.")


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[QuestionCatalog] = None,
    session_store: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Application settings, defaults to the environment-derived settings
        catalog: Pre-built catalog; loaded from ``QUESTIONS_FILE`` at startup when omitted
        session_store: Pre-built store; created from ``SESSION_BACKEND`` at startup when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings

    configure_logger(
        name=APP_LOGGER_NAME,
        level=settings.LOG_LEVEL,
        use_json=settings.LOG_JSON,
        log_file=settings.LOG_FILE,
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Single-user multiple-choice quiz sessions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.session_store = session_store
    app.state.quiz_service = None

    from pmpquiz.api import API_PREFIX, register_exception_handlers
    from pmpquiz.quiz.router import router as quiz_router

    register_exception_handlers(app)
    app.include_router(quiz_router, prefix=API_PREFIX, tags=["quiz"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": f"Welcome to the {settings.PROJECT_NAME} API", "start": f"{API_PREFIX}/start"}

    @app.get("/health")
    async def health():
        """Liveness endpoint reporting the catalog size."""
        catalog_size = len(app.state.catalog) if app.state.catalog is not None else 0
        return {"status": "ok", "questions": catalog_size}

    logger.info(f"Application created with {len(app.routes)} routes")
    return app

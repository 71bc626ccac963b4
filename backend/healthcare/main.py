from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager, suppress
from typing import Optional
from sqlalchemy import text
import asyncio
import logging

from healthcare.config.settings import Settings, settings as default_settings
from healthcare.core.errors import (
    AppError,
    STORE_UNAVAILABLE_ERRORS,
    app_error_handler,
    request_validation_handler,
    store_unavailable_handler,
    unhandled_error_handler,
)
from healthcare.core.middleware import resolve_caller_middleware
from healthcare.core.sessions import SessionStore
from healthcare.db.base import Base, get_engine, get_session_factory
from healthcare.routes.auth.router import router as auth_router, user_router
from healthcare.routes.patients.router import router as patients_router
from healthcare.routes.doctors.router import router as doctors_router
from healthcare.routes.mappings.router import router as mappings_router
import healthcare.db.models  # noqa: F401  (register tables on Base.metadata)

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SESSION_PRUNE_INTERVAL_SECONDS = 60 * 60


async def prune_sessions_periodically(store: SessionStore, interval: float):
    while True:
        await asyncio.sleep(interval)
        store.prune()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start‑up -----
    logger.info("Application startup …")
    app_settings: Settings = app.state.settings

    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(
            app_settings.database_url,
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
            pool_timeout=app_settings.db_pool_timeout,
        )
        app.state.engine = engine
        logger.info("DB engine ready and stored in app state.")

        if app_settings.auto_create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ensured (auto_create_tables).")

        app.state.session_factory = await get_session_factory(engine)
        logger.info("DB session factory ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
        if engine:  # Attempt to clean up engine if it was created
            await engine.dispose()
            logger.info("Disposed engine after startup failure.")
        raise  # Re-raise the exception to stop the Uvicorn server from starting fully

    app.state.session_store = SessionStore(ttl_seconds=app_settings.session_expire_minutes * 60)
    prune_task = asyncio.create_task(
        prune_sessions_periodically(app.state.session_store, SESSION_PRUNE_INTERVAL_SECONDS)
    )
    logger.info("Session store ready.")

    # ------------------------------------------------ give control back
    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")

    prune_task.cancel()
    with suppress(asyncio.CancelledError):
        await prune_task
    app.state.session_store.clear()

    try:
        await engine.dispose()
        logger.info("DB engine disposed")
    except Exception:
        logger.exception("Error disposing DB engine")

    logger.info("Shutdown complete")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="Healthcare Management API", lifespan=lifespan)
    app.state.settings = app_settings or default_settings

    app.middleware("http")(resolve_caller_middleware)

    # CORS -------------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o) for o in app.state.settings.cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors -----------------------------------------------------------------------------
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    for exc_class in STORE_UNAVAILABLE_ERRORS:
        app.add_exception_handler(exc_class, store_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ----------------------------------------------------------------- health‑check -----
    @app.get("/health")
    async def health_check(request: Request):
        database = "ok"
        try:
            async with request.app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except STORE_UNAVAILABLE_ERRORS:
            logger.exception("Health check could not reach the database")
            database = "unavailable"
        return {"status": "ok", "database": database}

    # ------------------------------------------------------------------- routes ---------
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(patients_router)
    app.include_router(doctors_router)
    app.include_router(mappings_router)
    return app


app = create_app()

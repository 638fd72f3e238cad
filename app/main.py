import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, payments
from app.core.config import Settings, settings as default_settings
from app.core.errors import register_exception_handlers
from app.core.rate_limit import InMemoryRateLimiter, RateLimiter
from app.database import build_engine, create_db_and_tables, engine as default_engine
from app.utils.dates import isoformat_utc, utcnow

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables(app.state.engine)
    logger.info("PocketDue API started environment=%s", app.state.settings.app_env)
    yield


def create_app(
    settings: Optional[Settings] = None,
    auth_limiter: Optional[RateLimiter] = None,
    api_limiter: Optional[RateLimiter] = None,
    init_db: bool = True,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="PocketDue API", version=API_VERSION, lifespan=lifespan if init_db else None)
    app.state.settings = settings
    if settings.database_url == default_settings.database_url:
        app.state.engine = default_engine
    else:
        app.state.engine = build_engine(settings)
    app.state.auth_limiter = auth_limiter or InMemoryRateLimiter(
        settings.auth_rate_limit_max,
        settings.rate_limit_window_seconds,
        settings.rate_limit_sweep_seconds,
    )
    app.state.api_limiter = api_limiter or InMemoryRateLimiter(
        settings.api_rate_limit_max,
        settings.rate_limit_window_seconds,
        settings.rate_limit_sweep_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(payments.router)

    @app.get("/")
    def root():
        return {
            "message": "Welcome to PocketDue API",
            "version": API_VERSION,
            "environment": settings.app_env,
        }

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "timestamp": isoformat_utc(utcnow()),
            "environment": settings.app_env,
        }

    return app


app = create_app()

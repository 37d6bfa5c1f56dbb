import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from . import __version__
from .api import categories, health, tasks
from .config import Settings
from .db.session import create_db_and_tables, create_db_engine
from .exceptions import TaskBeaconError, UnauthenticatedError

logger = logging.getLogger(__name__)


async def taskbeacon_error_handler(request: Request, exc: TaskBeaconError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.message}, headers=headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application.

    Raises:
        RuntimeError: If the authentication bypass is enabled in production
    """
    settings = settings or Settings.from_env()
    if settings.auth_bypass and settings.is_production:
        raise RuntimeError("AUTH_BYPASS cannot be enabled when ENVIRONMENT=production")

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = create_db_engine(settings.database_url, echo=settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting TaskBeacon {__version__} ({settings.environment})")
        if settings.auth_bypass:
            logger.warning("DEVELOPMENT MODE: Authentication is bypassed. DO NOT use in production!")
        elif not settings.jwt_secret:
            logger.warning("JWT_SECRET is not set; every API request will be rejected")
        create_db_and_tables(engine)
        yield
        engine.dispose()
        logger.info("TaskBeacon stopped")

    app = FastAPI(title="TaskBeacon", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskBeaconError, taskbeacon_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Mount routers
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])

    # Health check endpoints for probes
    app.include_router(health.router, tags=["health"])

    @app.get("/")
    async def read_root():
        return {"message": "Welcome to the TaskBeacon API!"}

    return app


app = create_app()

# main.py
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import admin, auth, crud, submissions
from .clock import Clock, SystemClock
from .config import Settings, get_settings
from .database import build_engine, build_session_factory, create_db_and_tables
from .exceptions import AuthenticationError, ConflictError, ReportTrackerError
from .sessions import SessionService

logger = logging.getLogger(__name__)


async def seed_default_admin(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    async with app.state.session_factory() as session:
        if await crud.get_admin_by_username(session, settings.DEFAULT_ADMIN_USERNAME):
            logger.info("Admin user already exists.")
            return
        try:
            await crud.create_admin(
                session,
                settings.DEFAULT_ADMIN_USERNAME,
                settings.DEFAULT_ADMIN_PASSWORD,
                now=app.state.clock.now()
            )
        except ConflictError:
            # Another worker seeded it first.
            return
        logger.info("Admin user '%s' created.", settings.DEFAULT_ADMIN_USERNAME)


async def sweep_expired_sessions(app: FastAPI) -> int:
    async with app.state.session_factory() as session:
        return await SessionService(session, app.state.clock).sweep()


async def run_session_sweeper(app: FastAPI, interval_seconds: float) -> None:
    """Purge expired sessions on a fixed interval until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await sweep_expired_sessions(app)
        except Exception:
            logger.exception("Session cleanup failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    logger.info("Creating database and tables...")
    await create_db_and_tables(app.state.engine)

    if settings.SEED_DEFAULT_ADMIN:
        await seed_default_admin(app)

    sweeper = asyncio.create_task(
        run_session_sweeper(app, settings.SESSION_SWEEP_INTERVAL_SECONDS)
    )
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        await app.state.engine.dispose()


# --- Error handlers: every error body is {"message": ...} ---

async def report_tracker_error_handler(request: Request, exc: ReportTrackerError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid input", "errors": jsonable_encoder(exc.errors())},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def create_app(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.APP_TITLE,
        description="Daily sales/outreach reports for employees, with admin review and CSV export.",
        lifespan=lifespan,
    )

    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    app.state.settings = settings
    app.state.clock = clock or SystemClock()
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_exception_handler(ReportTrackerError, report_tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(auth.employee_router)
    app.include_router(auth.admin_router)
    app.include_router(submissions.router)
    app.include_router(admin.router)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Daily Report Tracker API."}

    return app

"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.api.v1 import auth, customers
from app.core.config import settings
from app.core.constants import API_PREFIX, MSG_INTERNAL_ERROR
from app.core.errors import PortalError
from app.core.logging import get_logger, setup_logging
from app.core.sessions import Clock, SessionManager
from app.db.models.base import utcnow
from app.db.session import build_session_factory, create_schema, get_engine
from app.repositories import employees as employee_repository

logger = get_logger(__name__)


async def bootstrap(app: FastAPI) -> None:
    """Create missing tables and the seed admin account."""
    if settings.AUTO_CREATE_SCHEMA:
        await create_schema(app.state.engine)

    if not settings.SEED_ADMIN_USERNAME:
        return

    async with app.state.session_factory() as session:
        _, created = await employee_repository.ensure_employee(
            session,
            username=settings.SEED_ADMIN_USERNAME,
            password=settings.SEED_ADMIN_PASSWORD,
            full_name=settings.SEED_ADMIN_FULL_NAME,
        )
        await session.commit()
    if created:
        logger.info("Default admin user created", username=settings.SEED_ADMIN_USERNAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.LOG_LEVEL or ("DEBUG" if settings.APP_ENV == "development" else "INFO"))
    logger.info("Application starting", env=settings.APP_ENV)
    await bootstrap(app)
    yield
    logger.info("Application shutting down")
    await app.state.engine.dispose()


def _validation_message(exc: RequestValidationError) -> tuple[str, list[dict]]:
    errors = []
    missing = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        if err.get("type") == "missing":
            missing.append(field)
    if missing:
        return f"Missing required fields: {', '.join(missing)}.", errors
    return "Invalid request: " + "; ".join(f"{e['field']}: {e['message']}" for e in errors), errors


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to the portal's {success, message} error body."""

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message, errors = _validation_message(exc)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": message, "errors": errors},
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(
            "Store failure",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": MSG_INTERNAL_ERROR},
        )


def create_app(
    *,
    engine: AsyncEngine | None = None,
    clock: Clock = utcnow,
    session_manager: SessionManager | None = None,
) -> FastAPI:
    """Build the application. Tests pass their own engine and clock."""
    app = FastAPI(
        title="Employee Portal API",
        description="Session-gated CRUD over insurance customer records",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.engine = engine if engine is not None else get_engine()
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.clock = clock
    app.state.session_manager = session_manager or SessionManager(
        ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES),
        clock=clock,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(customers.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        return {"status": "ok", "env": settings.APP_ENV}

    return app


app = create_app()

"""
main.py
-------
FastAPI application factory and entry point.

Startup builds, in order: logging, the async engine, the session factory,
the identity provider and the facade. Routes reach the facade through
app.state (see dependencies.get_facade); nothing is module-global.

Every JSON error body uses the facade's envelope shape, including request
validation failures raised by FastAPI itself.

Run with:
    uvicorn main:app --reload              # development
    uvicorn main:app --workers 4           # production (no --reload)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from pesantren_hub.api.routes import auth, pesantren, platform
from pesantren_hub.core.config import settings
from pesantren_hub.core.exceptions import DEFAULT_ERROR_MESSAGE
from pesantren_hub.core.logging import configure_logging, get_logger
from pesantren_hub.db.session import create_engine_from_settings, create_session_factory
from pesantren_hub.facade import PesantrenHubFacade
from pesantren_hub.schemas.common import ErrorEnvelope
from pesantren_hub.services.identity import DatabaseIdentityProvider

logger = get_logger(__name__)

_REQUEST_PARTS = ("body", "query", "path", "header")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging()
    engine = create_engine_from_settings(settings)
    sessions = create_session_factory(engine)
    app.state.sessions = sessions
    app.state.facade = PesantrenHubFacade(sessions, DatabaseIdentityProvider(sessions))
    logger.info("Starting up", app=settings.APP_NAME, env=settings.APP_ENV, debug=settings.DEBUG)
    yield
    logger.info("Shutting down, disposing DB engine")
    await engine.dispose()


def _envelope(code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=code, content=ErrorEnvelope(message=message).model_dump())


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0]
        loc = [str(part) for part in first.get("loc", ()) if part not in _REQUEST_PARTS]
        message = f"Data tidak valid: {'.'.join(loc)}: {first.get('msg', '')}"
        logger.warning("Request rejected", path=request.url.path, error=message)
        return _envelope(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, DEFAULT_ERROR_MESSAGE)


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Multi-tenant pesantren administration backend: platform approval, "
            "santri and ustadz records, billing and withdrawals."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(platform.router)
    app.include_router(pesantren.router)
    register_exception_handlers(app)

    @app.get("/health", tags=["Health"], summary="Service and database health check")
    async def health(request: Request) -> JSONResponse:
        try:
            async with request.app.state.sessions() as db:
                await db.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("Health check failed", error=str(exc))
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "degraded", "app": settings.APP_NAME, "database": "down"},
            )
        return JSONResponse(
            content={"status": "ok", "app": settings.APP_NAME, "env": settings.APP_ENV, "database": "up"}
        )

    return app


app = create_application()

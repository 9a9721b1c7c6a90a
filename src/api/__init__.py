"""
REST API Layer for StudyFlow.

Provides:
- FastAPI application factory with CORS middleware
- Request-id logging context (X-Request-ID in, X-Request-ID out)
- Global exception handlers (envelope-shaped errors)
- API v1 router with plan, task, timer, log and chat endpoints
- Root-level health check for load balancer probes

The application owns exactly one StudySession (on ``app.state``); its
tick loop is cancelled when the application shuts down.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.api.schemas import error_response
from src.config.settings import Settings
from src.lib.errors import INTERNAL_ERROR, VALIDATION_ERROR
from src.lib.logging import REQUEST_ID_HEADER, request_context
from src.services.chat_service import ChatQueryService
from src.services.countdown_timer import AsyncioTickScheduler
from src.services.llm_client import GeminiClient, StructuredModel
from src.services.plan_service import PlanRequestService
from src.services.study_session import StudySession

logger = logging.getLogger(__name__)


def build_study_session(
    settings: Settings, model: StructuredModel | None = None
) -> StudySession:
    """
    Wire the services for one study session.

    Args:
        settings: Application settings
        model: Model client override (defaults to GeminiClient from settings)
    """
    if model is None:
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; plan and chat requests will fail")
        model = GeminiClient.from_settings(settings)

    return StudySession(
        plan_service=PlanRequestService(model, settings.plan_prompt),
        chat_service=ChatQueryService(model, settings.chat_prompt),
        scheduler=AsyncioTickScheduler(),
    )


def create_app(
    settings: Settings | None = None,
    session: StudySession | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Includes:
    - CORS middleware with origins from STUDYFLOW_CORS_ORIGINS
    - Global exception handlers
    - API v1 router with all endpoints
    - Root-level health check
    - Production: /docs and /redoc disabled

    Args:
        settings: Settings override (defaults to Settings.from_env())
        session: StudySession override (tests inject one with a stub model)

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    study_session = session or build_study_session(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.study_session.close()
        logger.info("Study session closed")

    app = FastAPI(
        title="StudyFlow",
        description="AI study plans with a focus timer and study assistant",
        version="0.1.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.study_session = study_session

    # -------------------------------------------------------------------------
    # Request context: every log line of a request carries its request_id
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        with request_context(
            request.method, request.url.path, request.headers.get(REQUEST_ID_HEADER)
        ) as request_id:
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    # -------------------------------------------------------------------------
    # Global exception handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info("Request validation failed on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response(VALIDATION_ERROR),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(INTERNAL_ERROR, "An unexpected error occurred."),
        )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    if settings.is_production and "*" in settings.cors_origins:
        raise ValueError(
            "STUDYFLOW_CORS_ORIGINS contains wildcard '*' which is forbidden in production. "
            "Specify explicit origins instead."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Accept-Language", "X-Request-ID"],
    )

    if settings.cors_origins:
        logger.info("CORS enabled for origins: %s", settings.cors_origins)
    else:
        logger.info("CORS: no origins configured (restrictive default)")

    app.include_router(router)

    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        """Root health check for infrastructure probes."""
        return {"status": "ok"}

    return app


__all__ = ["build_study_session", "create_app", "router"]

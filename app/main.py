from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import core components
from app.core.logging_config import setup_logging
from app.core.settings import Settings, settings as default_settings
from app.middleware.logging import LoggingMiddleware
from app.exceptions import AppException

# Import route modules
from app.routes import admin, ai, answers, auth, health, mentors, questions

from app.services.auth import MockIdentityResolver, MOCK_USERS, build_identity_resolver
from app.services.insights import InsightService
from app.services.llm import LLMConfig, build_llm_service
from app.services.storage import Storage

# Set up logging first
logger = setup_logging()


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "unknown")


def _validation_message(error: dict) -> str:
    msg = error.get("msg", "Invalid request")
    return msg.removeprefix("Value error, ")


def _seed_mock_users(app: FastAPI) -> None:
    from app.db import SessionLocal

    resolver = app.state.identity_resolver
    session = SessionLocal()
    try:
        storage = Storage(session)
        for role in MOCK_USERS:
            resolver.login(storage, role)
        logger.info("👥 Mock users ready: " + ", ".join(identity.uid for identity in MOCK_USERS.values()))
    except Exception as seed_err:
        logger.error(f"Failed seeding mock users: {seed_err}")
    finally:
        session.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("=" * 50)
    logger.info("🚀 MicroMentor API starting up")
    logger.info(f"📁 Environment: {settings.environment}")
    logger.info(f"🌐 CORS origins: {settings.cors_origins}")
    logger.info(f"🔐 Auth mode: {app.state.identity_resolver.name}")
    logger.info(f"📊 SQL Debug: {'enabled' if settings.sql_debug else 'disabled'}")
    ai_status = "✅ configured" if app.state.insight_service.enabled else "❌ not configured (fallback insights)"
    logger.info(f"🤖 AI insights: {ai_status}")
    logger.info("=" * 50)

    if settings.create_tables:
        from app.db import create_tables
        create_tables()
        logger.info("🗄️ Database tables ensured")

    if isinstance(app.state.identity_resolver, MockIdentityResolver):
        _seed_mock_users(app)

    yield
    logger.info("🛑 MicroMentor API shutting down gracefully")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    # Allow exposing the interactive docs in development or when explicitly enabled
    docs_enabled = settings.is_development or settings.show_docs

    app = FastAPI(
        title="MicroMentor API",
        description="Mentee questions, mentor answers and AI-generated insights",
        version=health.VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.identity_resolver = build_identity_resolver(settings)
    app.state.insight_service = InsightService(
        build_llm_service(settings),
        LLMConfig(timeout_seconds=settings.llm_timeout_seconds),
    )

    # Add middleware in correct order (last added = first executed)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(questions.router)
    app.include_router(answers.router)
    app.include_router(mentors.router)
    app.include_router(admin.router)
    app.include_router(ai.router)

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        correlation_id = _correlation_id(request)
        logger.warning(
            f"[{correlation_id}] {type(exc).__name__} on {request.url.path}: {exc.detail}"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "correlation_id": correlation_id},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        correlation_id = _correlation_id(request)
        errors = [
            {"loc": [str(part) for part in e.get("loc", ())], "msg": _validation_message(e)}
            for e in exc.errors()
        ]
        detail = errors[0]["msg"] if errors else "Invalid request"
        logger.warning(f"[{correlation_id}] Validation error on {request.url.path}: {detail}")
        return JSONResponse(
            status_code=400,
            content={"detail": detail, "errors": errors, "correlation_id": correlation_id},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        correlation_id = _correlation_id(request)
        logger.error(f"[{correlation_id}] Unhandled exception on {request.url.path}: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error": str(exc),
                "correlation_id": correlation_id,
            },
        )

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "MicroMentor API",
            "version": health.VERSION,
            "environment": settings.environment,
            "docs_url": "/docs" if docs_enabled else None,
            "health_check": "/health",
            "status": "running",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info" if default_settings.is_development else "warning"
    )

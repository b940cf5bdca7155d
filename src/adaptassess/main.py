"""
Adaptive Assessment Platform FastAPI Application

Adaptive skill assessments: knowledge-area selection, per-area difficulty
adjustment and role-fit scoring.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from adaptassess.ai import get_prompt_library
from adaptassess.config import settings
from adaptassess.core.database import close_db, engine, init_db
from adaptassess.core.errors import AssessmentPlatformError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Configure logging
    - Load prompt library into memory
    - Verify database connection and create missing tables

    Shutdown:
    - Close database connections
    """
    # Startup
    configure_logging()
    logger.info("Adaptive Assessment Platform starting...")

    prompt_lib = get_prompt_library()
    logger.info(f"Loaded {len(prompt_lib)} prompts (v{prompt_lib.metadata['version']})")

    if not settings.has_ai_provider:
        logger.warning("No AI provider key configured; using template question bank")

    try:
        await init_db()
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    logger.info("Adaptive Assessment Platform ready")

    yield

    # Shutdown
    logger.info("Adaptive Assessment Platform shutting down...")
    await close_db()


async def platform_error_handler(request: Request, exc: AssessmentPlatformError) -> JSONResponse:
    """Render platform errors as ``{"error": {"code", "message"}}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Adaptive Assessment Platform",
        description="Adaptive role-fit skill assessments",
        version="0.1.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Platform errors carry their own status code and error body
    app.add_exception_handler(AssessmentPlatformError, platform_error_handler)  # type: ignore

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "Adaptive Assessment Platform",
            "status": "operational",
            "version": "0.1.0",
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers.

        Returns:
            - status: healthy/unhealthy
            - checks: Individual health checks
        """
        checks: dict[str, dict[str, Any]] = {}

        # Database health
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        # Prompt library health
        try:
            prompt_lib = get_prompt_library()
            checks["prompt_library"] = {
                "status": "healthy",
                "prompts": len(prompt_lib),
                "version": prompt_lib.metadata["version"],
            }
        except Exception as e:
            checks["prompt_library"] = {"status": "unhealthy", "error": str(e)}

        # Question source is informational; the template bank always works
        checks["question_provider"] = {
            "status": "healthy",
            "source": "ai" if settings.has_ai_provider else "template",
        }

        all_healthy = all(check["status"] == "healthy" for check in checks.values())
        status_code = 200 if all_healthy else 503

        return JSONResponse(
            status_code=status_code,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Readiness check. Returns 200 when the database is reachable."""
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ready"}
        except Exception:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready"},
            )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        """Liveness check. Returns 200 if the process is serving requests."""
        return {"status": "alive"}

    # Register API routers
    from adaptassess.api.v1 import assessments, sessions

    app.include_router(assessments.router, prefix="/api/v1/assessments", tags=["Assessments"])
    app.include_router(sessions.router, prefix="/api/v1/sessions", tags=["Sessions"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "adaptassess.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

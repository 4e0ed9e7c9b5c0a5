"""
Health check and monitoring endpoints.
"""
import time
import logging
from fastapi import APIRouter, Depends, Request

from app.db import check_database_health
from app.services.insights import InsightService, get_insight_service

logger = logging.getLogger("app.health")
router = APIRouter(tags=["Health"])

VERSION = "1.0.0"


@router.get("/health")
async def health_check(request: Request):
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": request.app.state.settings.environment,
        "version": VERSION,
    }


@router.get("/health/detailed")
async def detailed_health_check(
    request: Request,
    insight_service: InsightService = Depends(get_insight_service),
):
    """Detailed health check with service status."""
    start_time = time.time()
    settings = request.app.state.settings

    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.environment,
        "services": {},
    }

    # Check database
    try:
        db_health = await check_database_health()
        health_status["services"]["database"] = db_health
        if db_health["status"] != "healthy":
            health_status["status"] = "degraded"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e),
        }
        health_status["status"] = "degraded"

    # Check LLM service
    if insight_service.llm is not None:
        health_status["services"]["llm"] = {
            "status": "configured" if insight_service.enabled else "unavailable",
            **insight_service.llm.describe(),
            "fallback_enabled": settings.llm_fallback_enabled,
        }
    else:
        health_status["services"]["llm"] = {
            "status": "not_configured",
            "note": "Using fallback insights",
        }

    health_status["services"]["auth"] = {"mode": request.app.state.identity_resolver.name}

    response_time = (time.time() - start_time) * 1000
    health_status["response_time_ms"] = round(response_time, 2)

    return health_status


@router.get("/ready")
async def readiness_check():
    """Kubernetes-style readiness probe."""
    try:
        db_health = await check_database_health()
        if db_health["status"] != "healthy":
            return {"status": "not_ready", "reason": "database_unavailable"}

        return {"status": "ready"}
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return {"status": "not_ready", "reason": str(e)}


@router.get("/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"status": "alive", "timestamp": time.time()}

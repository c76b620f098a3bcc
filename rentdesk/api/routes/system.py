"""
Service info and health checks (unversioned paths, plus the v1 health alias)
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from rentdesk.core.config import is_development, settings
from rentdesk.core.realtime import relay
from rentdesk.database import test_connection

router = APIRouter(tags=["System"])


def _environment() -> str:
    return "development" if is_development() else "production"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def service_info():
    return {
        "success": True,
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/api/docs",
        "status": "operational",
        "environment": _environment(),
    }


@router.get("/health")
@router.get(f"{settings.API_V1_STR}/health")
def health():
    """Load balancer health check; degraded when the database does not answer"""
    database_up = test_connection()
    return {
        "success": True,
        "status": "healthy" if database_up else "degraded",
        "database": "connected" if database_up else "disconnected",
        "timestamp": _timestamp(),
    }


@router.get("/status")
async def service_status():
    return {
        "success": True,
        "status": "operational",
        "timestamp": _timestamp(),
        "service": {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": _environment(),
            "debug": settings.DEBUG,
        },
        "realtime": {"connections": relay.get_total_connections()},
    }


@router.get("/api/version")
async def api_version():
    return {
        "success": True,
        "api_version": settings.VERSION,
        "app_name": settings.PROJECT_NAME,
        "api_prefix": settings.API_V1_STR,
    }

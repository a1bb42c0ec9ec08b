"""
Health API endpoints
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.core.config import config
from app.core.logger import logger

router = APIRouter()


@router.get("/health")
def health_check():
    """Liveness check"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "version": config.service_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check: MongoDB must answer a ping"""
    try:
        await request.app.state.database.ping()
    except PyMongoError as e:
        logger.warning(
            "Readiness check failed",
            metadata={"event": "readiness_check_failed", "error": str(e)}
        )
        return JSONResponse(
            status_code=503,
            content={
                "status": "not ready",
                "service": config.service_name,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "error": f"mongodb: {e}",
            },
        )

    return {
        "status": "ready",
        "service": config.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

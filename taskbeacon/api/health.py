"""Health check endpoints for liveness and readiness probes."""

import logging
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: answers without touching the database."""
    return {"status": "healthy", "service": "taskbeacon"}


@router.get("/ready")
def readiness_check(request: Request):
    """
    Readiness probe.
    Returns 200 OK once the database answers, 503 otherwise.
    """
    try:
        with request.app.state.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503, content={"status": "unavailable", "service": "taskbeacon"}
        )
    return {"status": "ready", "service": "taskbeacon"}

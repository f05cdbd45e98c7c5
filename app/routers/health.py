"""
Health check endpoints for monitoring service status.
"""

from fastapi import APIRouter, status
from sqlalchemy import text
from ..dependencies import DBSessionDep, ArqDep

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy", "service": "TubeShare API"}


@router.get("/db", status_code=status.HTTP_200_OK)
async def health_check_database(db_session: DBSessionDep):
    """
    Check database connectivity.
    Reports unhealthy instead of failing so probes can read the cause.
    """
    try:
        result = await db_session.execute(text("SELECT 1"))
        result.scalar()
        return {
            "status": "healthy",
            "service": "database",
            "dialect": db_session.bind.dialect.name,
        }
    except Exception as e:
        return {"status": "unhealthy", "service": "database", "error": str(e)}


@router.get("/redis", status_code=status.HTTP_200_OK)
async def health_check_redis(redis: ArqDep):
    """
    Check Redis/queue connectivity used by the maintenance worker.
    """
    try:
        await redis.ping()
        return {"status": "healthy", "service": "redis", "type": "arq queue"}
    except Exception as e:
        return {"status": "unhealthy", "service": "redis", "error": str(e)}

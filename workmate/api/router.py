"""API router - aggregates all endpoints."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from workmate.api.auth import router as auth_router
from workmate.api.likes import router as likes_router
from workmate.api.messages import router as messages_router
from workmate.api.oauth import router as oauth_router
from workmate.api.workplaces import router as workplaces_router
from workmate.core.database import Database, get_database
from workmate.core.errors import error_response

logger = structlog.get_logger()

router = APIRouter()

# Include sub-routers
router.include_router(auth_router)
router.include_router(likes_router)
router.include_router(oauth_router)
router.include_router(messages_router)
router.include_router(workplaces_router)


@router.get("/health")
async def health_check(database: Annotated[Database, Depends(get_database)]):
    """Liveness check that also pings the database."""
    try:
        reachable = await database.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Health check failed", error=str(e))
        reachable = False
    if not reachable:
        return error_response(503, "Database unavailable")
    return {"status": "healthy", "database": "ok"}

"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter

from rately.api.deps import DbSession
from rately.core.config import settings
from rately.core.database import check_db_connected
from rately.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbSession) -> HealthResponse:
    """Service status and database reachability, for load balancers and monitoring."""
    return HealthResponse(
        timestamp=datetime.now(UTC),
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )

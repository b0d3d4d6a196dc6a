"""Liveness and readiness probe."""
from fastapi import APIRouter, Depends

from crudapi import __version__
from crudapi.core.container import ApplicationContainer
from crudapi.interfaces.http.deps import get_container
from crudapi.schemas import HealthDatabase, HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health(container: ApplicationContainer = Depends(get_container)):
    connected = await container.database.ping()
    return HealthResponse(
        status="ok" if connected else "degraded",
        version=__version__,
        environment=container.settings.environment,
        database=HealthDatabase(connected=connected),
        uptime=round(container.uptime, 3),
        requests=container.stats.requests,
        errors=container.stats.errors,
    )

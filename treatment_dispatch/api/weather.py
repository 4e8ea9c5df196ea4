"""Routes météo / Weather routes."""

from fastapi import APIRouter, Depends

from treatment_dispatch.api.deps import require_permission
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.bridge import WeatherAlert
from treatment_dispatch.services import weather_service

router = APIRouter()


@router.get("/alerts", response_model=list[WeatherAlert])
async def weather_alerts(user: User = Depends(require_permission("weather", "read"))):
    """Alertes actives NOAA, liste vide si indisponible / Active NOAA alerts, empty when unavailable."""
    return await weather_service.get_weather_alerts()

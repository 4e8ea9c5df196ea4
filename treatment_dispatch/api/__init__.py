"""Table de routes canonique / Canonical route table."""

from fastapi import APIRouter

from treatment_dispatch.api import (
    audit,
    auth,
    dashboard,
    materials,
    public,
    tickets,
    tmc_centers,
    trucks,
    users,
    weather,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(materials.router, prefix="/materials", tags=["materials"])
api_router.include_router(materials.treatments_router, prefix="/treatments", tags=["materials"])
api_router.include_router(trucks.router, prefix="/trucks", tags=["trucks"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(tmc_centers.router, prefix="/tmc-centers", tags=["tmc-centers"])
api_router.include_router(tmc_centers.preferences_router, prefix="/preferences", tags=["preferences"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(weather.router, prefix="/weather", tags=["weather"])
api_router.include_router(audit.router, prefix="/audit", tags=["audit"])
api_router.include_router(public.router, tags=["public"])

"""Schémas Ponts et météo / Bridge and weather schemas."""

from datetime import datetime

from pydantic import BaseModel


class PublicBridgeStatus(BaseModel):
    bridge_id: str
    treated_at: datetime | None
    treatment_type: str | None
    ticket_status: str | None
    scheduled_time: datetime | None


class WeatherAlert(BaseModel):
    id: str | None = None
    areaDesc: str | None = None
    event: str | None = None
    severity: str | None = None
    description: str | None = None
    instruction: str | None = None
    effective: str | None = None
    expires: str | None = None

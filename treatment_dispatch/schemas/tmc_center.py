"""Schémas Centre / Dispatch center schemas."""

from pydantic import BaseModel, ConfigDict

from treatment_dispatch.schemas.common import CamelInput


class TmcCenterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    region: str | None
    latitude: float | None
    longitude: float | None


class PreferenceRead(BaseModel):
    tmc_id: int
    is_monitoring: bool
    name: str
    region: str | None


class PreferenceUpdate(CamelInput):
    is_monitoring: bool

"""Proxy alertes météo NOAA / NOAA weather-alert proxy.

Donnée best-effort : tout échec renvoie une liste vide.
Best-effort data: any failure yields an empty list.
"""

import logging

import httpx

from treatment_dispatch.config import settings

logger = logging.getLogger(__name__)

ALERT_FIELDS = ("id", "areaDesc", "event", "severity", "description", "instruction", "effective", "expires")


def _to_alert(feature: dict) -> dict:
    properties = feature.get("properties") or {}
    return {field: properties.get(field) for field in ALERT_FIELDS}


async def get_weather_alerts(client: httpx.AsyncClient | None = None) -> list[dict]:
    """Alertes actives / Active alerts, mapped to the dashboard's shape."""
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.WEATHER_TIMEOUT_SECONDS)
    try:
        response = await client.get(
            settings.WEATHER_ALERTS_URL,
            headers={"User-Agent": settings.WEATHER_USER_AGENT, "Accept": "application/geo+json"},
        )
        response.raise_for_status()
        features = response.json().get("features") or []
        return [_to_alert(feature) for feature in features]
    except (httpx.HTTPError, ValueError, AttributeError) as exc:
        logger.warning("Weather alerts unavailable: %s", exc)
        return []
    finally:
        if owns_client:
            await client.aclose()

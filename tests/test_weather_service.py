"""Tests du proxy météo / Weather proxy tests."""

import httpx
import pytest

from treatment_dispatch.services.weather_service import get_weather_alerts

NOAA_PAYLOAD = {
    "features": [
        {
            "properties": {
                "id": "urn:oid:2.49.0.1.840.0.1",
                "areaDesc": "Madison; Limestone",
                "event": "Winter Storm Warning",
                "severity": "Severe",
                "description": "Heavy snow expected.",
                "instruction": "Travel could be very difficult.",
                "effective": "2026-01-15T06:00:00-06:00",
                "expires": "2026-01-16T06:00:00-06:00",
                "sender": "w-nws.webmaster@noaa.gov",
            }
        }
    ]
}


@pytest.mark.asyncio
async def test_alerts_mapped():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(200, json=NOAA_PAYLOAD)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        alerts = await get_weather_alerts(client)

    assert seen["user_agent"]
    assert len(alerts) == 1
    assert alerts[0]["event"] == "Winter Storm Warning"
    assert alerts[0]["areaDesc"] == "Madison; Limestone"
    assert "sender" not in alerts[0]


@pytest.mark.asyncio
async def test_upstream_error_returns_empty_list():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503))) as client:
        assert await get_weather_alerts(client) == []


@pytest.mark.asyncio
async def test_network_failure_returns_empty_list():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await get_weather_alerts(client) == []


@pytest.mark.asyncio
async def test_malformed_body_returns_empty_list():
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>oops</html>"))
    ) as client:
        assert await get_weather_alerts(client) == []

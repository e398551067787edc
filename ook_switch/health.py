"""Health reporting for the transmitter service.

Components (``sink``, ``sequencer``, ``ingress``) report healthy or not
with an optional detail string. The service lifecycle state is tracked
separately and only counts as healthy while ``active``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from aiohttp import web


def _timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


@dataclass(slots=True)
class ComponentStatus:
    healthy: bool
    detail: Optional[str] = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class ServiceState:
    state: str
    healthy: bool
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class HealthReporter:
    """Collects component and service state for ``/healthz``."""

    def __init__(self) -> None:
        self._components: Dict[str, ComponentStatus] = {}
        self._service: Optional[ServiceState] = None
        self._lock = asyncio.Lock()

    async def update(
        self, name: str, healthy: bool, detail: Optional[str] = None
    ) -> None:
        async with self._lock:
            self._components[name] = ComponentStatus(healthy=healthy, detail=detail)

    async def set_service_state(self, state: str, *, healthy: bool) -> None:
        async with self._lock:
            self._service = ServiceState(state=state, healthy=healthy)

    async def snapshot(self) -> Dict[str, object]:
        async with self._lock:
            components = dict(self._components)
            service = self._service

        listing: List[Dict[str, object]] = [
            {
                "name": name,
                "healthy": status.healthy,
                "detail": status.detail,
                "updatedAt": _timestamp(status.updated_at),
            }
            for name, status in sorted(components.items())
        ]

        healthy = all(status.healthy for status in components.values())
        if service is not None:
            healthy = healthy and service.healthy

        payload: Dict[str, object] = {
            "status": "ok" if healthy else "degraded",
            "components": listing,
        }
        if service is not None:
            payload["service"] = {
                "state": service.state,
                "healthy": service.healthy,
                "updatedAt": _timestamp(service.updated_at),
            }
        return payload

    async def handle_request(self, request: web.Request) -> web.Response:
        snapshot = await self.snapshot()
        return web.json_response(
            snapshot, status=200 if snapshot["status"] == "ok" else 503
        )

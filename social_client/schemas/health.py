"""Schema for the service health probe."""
from __future__ import annotations

from .users import ServerModel


class HealthStatus(ServerModel):
    success: bool
    message: str = ""
    timestamp: str | None = None
    uptime: float | None = None

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class SystemStatus(BaseModel):
    """Result of the most recent probe.

    Lives only in memory. ``is_down`` stays ``None`` until the first probe
    completes after a restart.
    """
    is_down: Optional[bool] = None
    last_checked: Optional[datetime] = None
    last_latency_ms: Optional[int] = Field(None, description="Latency of the last completed probe, in ms")

    def record(self, is_down: bool, latency_ms: Optional[int], checked_at: datetime) -> None:
        self.is_down = is_down
        self.last_latency_ms = latency_ms
        self.last_checked = checked_at

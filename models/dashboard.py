from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from models.log_entry import LogEntry


class ActivityPoint(BaseModel):
    label: str
    value: int = Field(..., ge=0, le=1)  # 1 = Success, 0 = Error


class DashboardData(BaseModel):
    entries: List[LogEntry]
    success_count: int
    error_count: int
    uptime_ratio: float
    currently_down: Optional[bool] = None
    last_checked_at: Optional[datetime] = None
    last_latency_ms: Optional[int] = None
    activity: List[ActivityPoint] = Field(default_factory=list)
    restore_interval_s: float = 300
    cache_interval_s: float = 3600

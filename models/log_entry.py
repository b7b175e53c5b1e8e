from pydantic import BaseModel, Field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

MAX_LOG = 100  # rolling window kept on disk


class ActionType(str, Enum):
    HEALTH_CHECK = "HealthCheck"
    RESTORE_TRIGGERED = "RestoreTriggered"
    CACHE_CLEAR = "CacheClear"


class ActionStatus(str, Enum):
    SUCCESS = "Success"
    ERROR = "Error"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LogEntry(BaseModel):
    """One recorded probe or remote action."""
    timestamp: datetime = Field(default_factory=utc_now)
    action: ActionType
    status: ActionStatus
    latency_ms: Optional[int] = Field(None, ge=0, alias="latencyMs")  # only on completed health checks
    http_status: Optional[int] = Field(None, alias="httpStatus")
    detail: Optional[str] = None  # "Site OK" / "Site down" or the transport error

    class Config:
        populate_by_name = True

    @property
    def is_success(self) -> bool:
        return self.status == ActionStatus.SUCCESS

    def to_document(self) -> dict:
        """Serialized form used by the log file; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

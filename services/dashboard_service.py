from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
from models.dashboard import ActivityPoint, DashboardData
from models.log_entry import LogEntry, ActionStatus, utc_now
from models.system_status import SystemStatus
from services.health_checker import HealthChecker
from services.log_store import LogStore

ACTIVITY_WINDOW = 20


def calculate_uptime_ratio(entries: Sequence[LogEntry]) -> float:
    """Percentage of successful entries, one decimal, halves rounded up. An empty log counts as 100%."""
    if not entries:
        return 100.0
    success = sum(1 for entry in entries if entry.status == ActionStatus.SUCCESS)
    ratio = Decimal(success * 100) / Decimal(len(entries))
    return float(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def build_activity_series(entries: Sequence[LogEntry], window: int = ACTIVITY_WINDOW) -> List[ActivityPoint]:
    # entries are newest-first; the chart wants oldest-first
    recent = list(entries[:window])
    recent.reverse()
    return [
        ActivityPoint(
            label=entry.timestamp.astimezone().strftime("%H:%M:%S"),
            value=1 if entry.status == ActionStatus.SUCCESS else 0,
        )
        for entry in recent
    ]


class DashboardService:
    """Builds the dashboard snapshot from the log and the latest status.

    With a ``health_checker`` the site is probed again whenever the cached
    ``SystemStatus`` is older than ``probe_max_age`` seconds; otherwise the
    cached result is reported as is.
    """

    def __init__(
        self,
        store: LogStore,
        status: SystemStatus,
        health_checker: Optional[HealthChecker] = None,
        probe_max_age: float = 120,
        restore_interval: float = 300,
        cache_interval: float = 3600,
    ):
        self.store = store
        self.status = status
        self.health_checker = health_checker
        self.probe_max_age = probe_max_age
        self.restore_interval = restore_interval
        self.cache_interval = cache_interval

    def _status_is_stale(self) -> bool:
        if self.status.last_checked is None:
            return True
        return utc_now() - self.status.last_checked > timedelta(seconds=self.probe_max_age)

    async def get_dashboard_data(self) -> DashboardData:
        if self.health_checker is not None and self._status_is_stale():
            await self.health_checker.check_health()

        entries = await self.store.load()
        success_count = sum(1 for entry in entries if entry.status == ActionStatus.SUCCESS)
        error_count = sum(1 for entry in entries if entry.status == ActionStatus.ERROR)

        return DashboardData(
            entries=entries,
            success_count=success_count,
            error_count=error_count,
            uptime_ratio=calculate_uptime_ratio(entries),
            currently_down=self.status.is_down,
            last_checked_at=self.status.last_checked,
            last_latency_ms=self.status.last_latency_ms,
            activity=build_activity_series(entries),
            restore_interval_s=self.restore_interval,
            cache_interval_s=self.cache_interval,
        )

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set
from config import settings
from models.system_status import SystemStatus
from services.log_store import LogStore, log_store
from services.health_checker import HealthChecker, HealthCheckResult
from services.action_executor import ActionExecutor

logger = logging.getLogger(__name__)


class MonitorScheduler:
    """Drives the restore cycle and the cache cycle on fixed-rate timers.

    Owns the ``SystemStatus`` snapshot; the dashboard receives it by
    reference. Manual triggers call the same cycle coroutines directly.
    """

    def __init__(
        self,
        store: LogStore,
        target_url: str,
        restore_url: str,
        clear_cache_url: str,
        restore_interval: float = 300,
        cache_interval: float = 3600,
        health_timeout: float = 10,
        action_timeout: Optional[float] = None,
    ):
        self.store = store
        self.status = SystemStatus()
        self.health_checker = HealthChecker(target_url, store, self.status, timeout=health_timeout)
        self.executor = ActionExecutor(restore_url, clear_cache_url, store, timeout=action_timeout)
        self.restore_interval = restore_interval  # seconds
        self.cache_interval = cache_interval  # seconds
        self._running = False
        self._timers: List[asyncio.Task] = []
        self._in_flight: Set[asyncio.Task] = set()

    # --- CYCLES ---

    async def run_restore_cycle(self) -> HealthCheckResult:
        result = await self.health_checker.check_health()
        if result.is_down:
            await self.executor.trigger_restore()
        return result

    async def run_cache_cycle(self) -> None:
        await self.executor.clear_cache()

    # --- TIMERS ---

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._timers = [
            asyncio.create_task(self._every(self.restore_interval, self.run_restore_cycle, "restore")),
            asyncio.create_task(self._every(self.cache_interval, self.run_cache_cycle, "cache")),
        ]
        intervals = f"restore every {self.restore_interval:g}s, cache every {self.cache_interval:g}s"
        logger.info(f"🔄 Monitor scheduler started ({intervals}).")

    async def _every(self, interval: float, cycle: Callable[[], Awaitable], name: str) -> None:
        # Fixed rate from start: ticks are not pushed back by slow cycles
        loop = asyncio.get_running_loop()
        next_run = loop.time()
        while self._running:
            self._spawn(cycle, name)
            next_run += interval
            await asyncio.sleep(max(0.0, next_run - loop.time()))

    def _spawn(self, cycle: Callable[[], Awaitable], name: str) -> None:
        task = asyncio.create_task(cycle())
        self._in_flight.add(task)
        task.add_done_callback(lambda t: self._finished(t, name))

    def _finished(self, task: asyncio.Task, name: str) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"❌ Scheduled {name} cycle crashed: {error!r}")

    def stop(self) -> None:
        """Stop the timers. Cycles already running are left to finish."""
        self._running = False
        for timer in self._timers:
            timer.cancel()
        self._timers = []
        logger.info("⛔ Monitor scheduler stopped.")


def build_scheduler(store: LogStore = log_store) -> MonitorScheduler:
    return MonitorScheduler(
        store,
        target_url=settings.TARGET_URL,
        restore_url=settings.RESTORE_URL,
        clear_cache_url=settings.CLEAR_CACHE_URL,
        restore_interval=settings.RESTORE_INTERVAL_S,
        cache_interval=settings.CACHE_INTERVAL_S,
        health_timeout=settings.HEALTH_TIMEOUT_S,
        action_timeout=settings.ACTION_TIMEOUT_S,
    )


# Singleton instance to import
monitor_scheduler = build_scheduler()

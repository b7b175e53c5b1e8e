import httpx
import logging
from typing import Optional
from models.log_entry import LogEntry, ActionType, ActionStatus
from models.system_status import SystemStatus
from services.log_store import LogStore

logger = logging.getLogger(__name__)


class HealthCheckResult:
    def __init__(self, is_down: bool, latency_ms: Optional[int], http_status: Optional[int] = None, error: Optional[str] = None):
        self.is_down = is_down
        self.latency_ms = latency_ms  # None when the request never completed
        self.http_status = http_status
        self.error = error  # timeout, connection error, etc.


def elapsed_ms(response: httpx.Response) -> int:
    return int(round(response.elapsed.total_seconds() * 1000))


class HealthChecker:
    """Single-shot reachability probe for the monitored site.

    Every call records exactly one ``HealthCheck`` entry and refreshes the
    shared ``SystemStatus``. A response with status >= 400 still counts as a
    completed check; only transport failures are logged as errors.
    """

    def __init__(self, url: str, store: LogStore, status: SystemStatus, timeout: float = 10):
        self.url = url
        self.store = store
        self.status = status
        self.timeout = timeout  # seconds

    async def check_health(self) -> HealthCheckResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, follow_redirects=True)
            latency = elapsed_ms(response)
            is_down = response.status_code >= 400
            result = HealthCheckResult(is_down, latency, response.status_code)
            entry = LogEntry(
                action=ActionType.HEALTH_CHECK,
                status=ActionStatus.SUCCESS,
                latency_ms=latency,
                http_status=response.status_code,
                detail="Site down" if is_down else "Site OK",
            )
            if is_down:
                logger.warning(f"🔴 {self.url} answered {response.status_code} ({latency} ms)")
            else:
                logger.info(f"✅ {self.url} is UP ({response.status_code}, {latency} ms)")

        except httpx.TimeoutException:
            result = HealthCheckResult(True, None, error="Timeout")
        except httpx.RequestError as e:
            result = HealthCheckResult(True, None, error=str(e) or e.__class__.__name__)
        except Exception as e:
            result = HealthCheckResult(True, None, error=str(e) or e.__class__.__name__)

        if result.error is not None:
            logger.error(f"❌ Health check of {self.url} failed: {result.error}")
            entry = LogEntry(
                action=ActionType.HEALTH_CHECK,
                status=ActionStatus.ERROR,
                detail=result.error,
            )

        stored = await self.store.append(entry)
        self.status.record(result.is_down, result.latency_ms, stored.timestamp)
        return result

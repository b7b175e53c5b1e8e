import httpx
import logging
from typing import Optional
from models.log_entry import LogEntry, ActionType, ActionStatus
from services.log_store import LogStore

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Fires the remote restore and cache-clear endpoints.

    Each call makes one request and records one log entry. Failures are not
    retried; the next scheduled tick is the retry.
    """

    def __init__(self, restore_url: str, clear_cache_url: str, store: LogStore, timeout: Optional[float] = None):
        self.restore_url = restore_url
        self.clear_cache_url = clear_cache_url
        self.store = store
        self.timeout = timeout  # None = wait as long as the endpoint takes

    async def _call(self, action: ActionType, url: str) -> LogEntry:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, follow_redirects=True)
            entry = LogEntry(
                action=action,
                status=ActionStatus.SUCCESS,
                http_status=response.status_code,
            )
            logger.info(f"✅ {action.value} call answered {response.status_code}")
        except httpx.TimeoutException:
            entry = LogEntry(action=action, status=ActionStatus.ERROR, detail="Timeout")
            logger.error(f"❌ {action.value} call timed out")
        except Exception as e:
            error = str(e) or e.__class__.__name__
            entry = LogEntry(action=action, status=ActionStatus.ERROR, detail=error)
            logger.error(f"❌ {action.value} call failed: {error}")

        return await self.store.append(entry)

    async def trigger_restore(self) -> LogEntry:
        logger.info("🔄 Triggering remote restore")
        return await self._call(ActionType.RESTORE_TRIGGERED, self.restore_url)

    async def clear_cache(self) -> LogEntry:
        logger.info("🔄 Clearing remote cache")
        return await self._call(ActionType.CACHE_CLEAR, self.clear_cache_url)

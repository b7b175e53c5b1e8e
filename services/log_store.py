# backend/services/log_store.py
import asyncio
import json
import logging
import os
import tempfile
from typing import List, Sequence
from pydantic import ValidationError
from config import settings
from models.log_entry import LogEntry, MAX_LOG, utc_now

logger = logging.getLogger(__name__)


class LogStore:
    """Rolling, newest-first action log persisted as a single JSON document.

    ``append`` is a load / prepend / truncate / save sequence guarded by an
    ``asyncio.Lock``, so cycles that overlap on the event loop never drop
    each other's entries.
    """

    def __init__(self, path: str, max_entries: int = MAX_LOG):
        self.path = path
        self.max_entries = max_entries
        self._lock = asyncio.Lock()

    # --- FILE ACCESS (runs in the default executor) ---

    def _read(self) -> List[LogEntry]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Log file {self.path} unreadable, starting with empty history: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(f"⚠️ Log file {self.path} does not hold a list, starting with empty history")
            return []

        entries = []
        for item in raw:
            try:
                entries.append(LogEntry(**item))
            except (TypeError, ValidationError) as e:
                logger.warning(f"⚠️ Skipping malformed log entry {item!r}: {e}")
                continue
        return entries

    def _write(self, entries: Sequence[LogEntry]) -> bool:
        directory = os.path.dirname(os.path.abspath(self.path))
        documents = [entry.to_document() for entry in entries]
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".logs-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(documents, f, indent=2)
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"❌ Failed to write log file {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
            return False

    # --- PUBLIC API ---

    async def load(self) -> List[LogEntry]:
        """Return the stored entries newest-first; empty when missing or corrupt."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read)

    async def save(self, entries: Sequence[LogEntry]) -> bool:
        """Overwrite the log with ``entries`` (capped). Returns False if the write failed."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._write, list(entries)[: self.max_entries])

    async def append(self, entry: LogEntry) -> LogEntry:
        """Record ``entry`` at the front of the log and return the stored copy.

        The timestamp is assigned here, under the lock, so the position in the
        log and the recorded time always agree.
        """
        async with self._lock:
            stored = entry.model_copy(update={"timestamp": utc_now()})
            entries = await self.load()
            entries.insert(0, stored)
            await self.save(entries[: self.max_entries])
        logger.debug(f"Logged {stored.action.value}/{stored.status.value}")
        return stored

    async def clear(self) -> None:
        async with self._lock:
            await self.save([])


# Singleton instance
log_store = LogStore(settings.LOG_FILE)

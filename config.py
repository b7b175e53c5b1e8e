# backend/config.py
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "10000"))

    # Monitored site and remote action endpoints (access keys travel in the query string)
    TARGET_URL: str = os.getenv("TARGET_URL", "")
    RESTORE_URL: str = os.getenv("RESTORE_URL", "")
    CLEAR_CACHE_URL: str = os.getenv("CLEAR_CACHE_URL", "")

    LOG_FILE: str = os.getenv("LOG_FILE", "logs.json")

    HEALTH_TIMEOUT_S: float = float(os.getenv("HEALTH_TIMEOUT_S", "10"))
    ACTION_TIMEOUT_S: Optional[float] = _env_optional_float("ACTION_TIMEOUT_S")

    RESTORE_INTERVAL_S: float = float(os.getenv("RESTORE_INTERVAL_S", "300"))
    CACHE_INTERVAL_S: float = float(os.getenv("CACHE_INTERVAL_S", "3600"))

    DASHBOARD_LIVE_PROBE: bool = _env_bool("DASHBOARD_LIVE_PROBE", "true")
    # a cached probe younger than this is reused instead of probing again
    DASHBOARD_PROBE_MAX_AGE_S: float = float(os.getenv("DASHBOARD_PROBE_MAX_AGE_S", "120"))
    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED", "true")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def missing_urls(self) -> list:
        """Names of the endpoint settings that are still empty."""
        return [
            name for name in ("TARGET_URL", "RESTORE_URL", "CLEAR_CACHE_URL")
            if not getattr(self, name)
        ]


settings = Settings()

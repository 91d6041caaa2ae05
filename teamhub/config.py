"""Configuration module centralizing environment access.

All environment reads go through a single Settings object so routers,
services and tests agree on one view of the configuration.
"""
import os
from typing import Optional


class Settings:
    def __init__(self) -> None:
        # Core
        inferred_testing = (
            os.getenv("PYTEST_CURRENT_TEST")
            or os.getenv("TESTING") == "1"
            or os.getenv("ENVIRONMENT") == "testing"
        )
        self.environment: str = "testing" if inferred_testing else os.getenv("ENVIRONMENT", "development")
        self.port: int = int(os.getenv("PORT", "8000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.database_url: str = os.getenv("DATABASE_URL") or "sqlite:///./teamhub.db"

        # Realtime push
        self.realtime_enabled: bool = os.getenv("REALTIME_ENABLED", "true").lower() == "true"
        self.realtime_queue_size: int = int(os.getenv("REALTIME_QUEUE_SIZE", "100"))

        # Chat
        self.message_history_limit: int = int(os.getenv("MESSAGE_HISTORY_LIMIT", "100"))

        # Admin protection
        self.admin_api_key: Optional[str] = os.getenv("ADMIN_API_KEY")


_SETTINGS_CACHE: Optional[Settings] = None


def get_settings(refresh: bool = False) -> Settings:
    """Return a (possibly cached) Settings instance.

    Pass refresh=True in tests after modifying environment variables to
    force re-evaluation.
    """
    global _SETTINGS_CACHE
    if refresh or _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings()
    return _SETTINGS_CACHE

"""Service singletons (initialized once) used across routers.

This avoids circular imports between routers and keeps construction logic
away from `main.py` for cleaner testing.
"""
import logging
from typing import Optional

from teamhub.config import get_settings
from teamhub.domain.events import event_dispatcher
from teamhub.infrastructure.realtime import RealtimeHub

settings = get_settings()
logger = logging.getLogger(__name__)

realtime_hub: Optional[RealtimeHub] = None

if settings.realtime_enabled:
    realtime_hub = RealtimeHub(queue_maxsize=settings.realtime_queue_size)
    event_dispatcher.attach(realtime_hub)
    logger.info("📡 Realtime hub attached to event dispatcher")
else:
    logger.info("Realtime push disabled; task and message events will not be delivered")

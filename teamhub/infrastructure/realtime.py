"""Infrastructure layer: in-memory realtime hub.

Each subscriber holds a bounded ``asyncio.Queue`` per connection. Publishing
never blocks: a subscriber whose queue is full is dropped instead of
slowing down the request that produced the event.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


class RealtimeHub:
    """Topic based publish/subscribe over asyncio queues."""

    def __init__(self, queue_maxsize: int = 100) -> None:
        # topic -> set of subscriber queues
        self._subscribers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)
        self._queue_maxsize = queue_maxsize

    def subscribe(self, topic: str, queue: Optional[asyncio.Queue] = None) -> asyncio.Queue:
        """Subscribe to a topic, optionally sharing an existing queue across topics."""
        if queue is None:
            queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[topic].add(queue)
        logger.info(f"[REALTIME] subscribed to {topic} ({len(self._subscribers[topic])} listeners)")
        return queue

    def unsubscribe(self, topic: str, queue: asyncio.Queue) -> None:
        listeners = self._subscribers.get(topic)
        if listeners is None:
            return
        listeners.discard(queue)
        if not listeners:
            del self._subscribers[topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def publish(self, topic: str, event: str, payload: Any) -> None:
        """Push ``{"event", "data"}`` to every subscriber of ``topic``."""
        message = {"event": event, "data": payload}
        dead_queues = []
        for queue in self._subscribers.get(topic, set()):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        for queue in dead_queues:
            logger.warning(f"[REALTIME] dropping slow subscriber on {topic}")
            self.unsubscribe(topic, queue)

"""Domain layer: Domain events and a best-effort event dispatcher.

Events are pushed to connected clients through whatever handlers are
registered. Delivery is observe-only: a failing handler is logged and the
request that raised the event carries on unaffected.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

logger = logging.getLogger(__name__)

GLOBAL_TOPIC = "global"


def team_topic(team_id: str) -> str:
    return f"team:{team_id}"


@dataclass
class DomainEvent:
    """Base class for domain events."""

    name = "event"

    @property
    def topic(self) -> str:
        return GLOBAL_TOPIC

    def payload(self) -> Any:
        return {}


@dataclass
class TaskUpdated(DomainEvent):
    """Fired when a task is created or changed."""

    team_id: str
    task: Dict[str, Any] = field(default_factory=dict)
    name = "task-updated"

    @property
    def topic(self) -> str:
        return team_topic(self.team_id)

    def payload(self) -> Any:
        return self.task


@dataclass
class TaskDeleted(DomainEvent):
    """Fired when a task is removed."""

    team_id: str
    task_id: str
    name = "task-deleted"

    @property
    def topic(self) -> str:
        return team_topic(self.team_id)

    def payload(self) -> Any:
        return {"taskId": self.task_id}


@dataclass
class MessagePosted(DomainEvent):
    """Fired when a chat message is sent; chat is global."""

    message: Dict[str, Any] = field(default_factory=dict)
    name = "new-message"

    def payload(self) -> Any:
        return self.message


class Notifier(Protocol):
    """Fire-and-forget push channel (e.g. the realtime hub)."""

    def publish(self, topic: str, event: str, payload: Any) -> None:
        ...


class EventDispatcher:
    """Simple event dispatcher forwarding domain events to notifiers."""

    def __init__(self):
        self._notifiers: List[Notifier] = []

    @property
    def attached(self) -> bool:
        return bool(self._notifiers)

    def attach(self, notifier: Notifier) -> None:
        """Register a push channel for every event."""
        self._notifiers.append(notifier)

    def detach(self, notifier: Notifier) -> None:
        if notifier in self._notifiers:
            self._notifiers.remove(notifier)

    def dispatch(self, event: DomainEvent) -> None:
        """Publish an event to all channels without observing the outcome."""
        if not self._notifiers:
            return
        for notifier in list(self._notifiers):
            try:
                notifier.publish(event.topic, event.name, event.payload())
            except Exception as e:
                logger.warning(f"[EVENTS] {event.name} to {event.topic} not delivered: {e}")


# Global event dispatcher instance
event_dispatcher = EventDispatcher()

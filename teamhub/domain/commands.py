"""Domain layer: Command pattern for handling parsed intents."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from database.models import Task, User


@dataclass(frozen=True)
class Command:
    """A raw assistant command and who issued it."""

    text: str
    user: User
    project_id: Optional[str] = None


@dataclass
class CommandContext:
    """Per-request view handed to handlers.

    ``tasks`` is the scoped candidate set, read once before the handler runs
    and never refreshed during the request.
    """

    user: User
    project_id: Optional[str] = None
    tasks: List[Task] = field(default_factory=list)


@dataclass
class ResultEnvelope:
    message: str
    task: Optional[Task] = None
    tasks: Optional[List[Task]] = None


IntentT = TypeVar("IntentT")


class CommandHandler(ABC, Generic[IntentT]):
    """Handler interface for executing one kind of intent."""

    @abstractmethod
    async def handle(self, intent: IntentT, context: CommandContext) -> ResultEnvelope:
        """Execute the intent and describe the outcome."""
        pass

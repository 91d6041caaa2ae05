"""Domain layer: structured intents produced by the command parser.

Each intent is its own frozen dataclass carrying only the fields that make
sense for it. ``None`` always means "not supplied in the command"; an empty
string is never used as a placeholder.
"""
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from teamhub.domain.enums import TaskStatus


class IntentTag(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    MOVE = "move"
    ASSIGN = "assign"
    DELETE = "delete"
    LIST = "list"
    HELP = "help"
    UNKNOWN = "unknown"
    ERROR = "error"


UNKNOWN_COMMAND_MESSAGE = 'I didn\'t understand that command. Try "help" for available commands.'


@dataclass(frozen=True)
class TaskReference:
    """A direct task id or a free-text title fragment (exactly one is set)."""

    task_id: Optional[str] = None
    title: Optional[str] = None

    @property
    def is_direct(self) -> bool:
        return self.task_id is not None

    def describe(self) -> str:
        return self.task_id if self.is_direct else f'"{self.title}"'


@dataclass(frozen=True)
class CreateIntent:
    tag: ClassVar[IntentTag] = IntentTag.CREATE
    title: str
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assignee_name: Optional[str] = None


@dataclass(frozen=True)
class UpdateIntent:
    tag: ClassVar[IntentTag] = IntentTag.UPDATE
    task_ref: Optional[TaskReference]
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None


@dataclass(frozen=True)
class MoveIntent:
    tag: ClassVar[IntentTag] = IntentTag.MOVE
    task_ref: Optional[TaskReference]
    status: Optional[TaskStatus] = None


@dataclass(frozen=True)
class AssignIntent:
    tag: ClassVar[IntentTag] = IntentTag.ASSIGN
    task_ref: Optional[TaskReference]
    assignee_name: Optional[str] = None


@dataclass(frozen=True)
class DeleteIntent:
    tag: ClassVar[IntentTag] = IntentTag.DELETE
    task_ref: Optional[TaskReference]


@dataclass(frozen=True)
class ListIntent:
    tag: ClassVar[IntentTag] = IntentTag.LIST
    assigned_to_me: bool = False
    status: Optional[TaskStatus] = None


@dataclass(frozen=True)
class HelpIntent:
    tag: ClassVar[IntentTag] = IntentTag.HELP


@dataclass(frozen=True)
class UnknownIntent:
    tag: ClassVar[IntentTag] = IntentTag.UNKNOWN
    message: str = UNKNOWN_COMMAND_MESSAGE


@dataclass(frozen=True)
class ParseError:
    """The command matched an intent but a mandatory field was missing."""

    tag: ClassVar[IntentTag] = IntentTag.ERROR
    message: str


ParsedIntent = Union[
    CreateIntent,
    UpdateIntent,
    MoveIntent,
    AssignIntent,
    DeleteIntent,
    ListIntent,
    HelpIntent,
    UnknownIntent,
    ParseError,
]

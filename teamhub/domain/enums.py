"""Domain layer: closed vocabularies shared by models, parser and gate."""
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


# Phrases a command may use for each status, including free-text synonyms.
DEFAULT_STATUS_VOCABULARY = {
    "todo": TaskStatus.TODO,
    "to do": TaskStatus.TODO,
    "in-progress": TaskStatus.IN_PROGRESS,
    "in progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
    "completed": TaskStatus.DONE,
}

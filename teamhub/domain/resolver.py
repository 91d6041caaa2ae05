"""Domain layer: fuzzy resolution of task and user references.

Matching is deliberately simple: a case-insensitive substring test in both
directions, returning the first candidate in the order supplied. There is
no scoring; callers that need a different winner must order the candidates.
"""
from typing import Iterable, Optional

from database.models import Task, User
from teamhub.domain.intents import TaskReference


def _overlaps(candidate: Optional[str], fragment: str) -> bool:
    if not candidate:
        return False
    candidate = candidate.lower()
    return fragment in candidate or candidate in fragment


def resolve_task(ref: Optional[TaskReference], candidates: Iterable[Task]) -> Optional[Task]:
    """Return the first candidate matching ``ref`` or None."""
    if ref is None:
        return None
    if ref.is_direct:
        task_id = ref.task_id.lower()
        return next((task for task in candidates if str(task.id).lower() == task_id), None)
    if not ref.title:
        return None
    fragment = ref.title.lower()
    return next((task for task in candidates if _overlaps(task.title, fragment)), None)


def resolve_user(name_fragment: Optional[str], candidates: Iterable[User]) -> Optional[User]:
    """Return the first user whose name overlaps the fragment or whose email contains it.

    ``candidates`` is the assignable pool: members of the caller's team.
    """
    if not name_fragment:
        return None
    fragment = name_fragment.lower()
    for user in candidates:
        if _overlaps(user.name, fragment) or (user.email and fragment in user.email.lower()):
            return user
    return None

"""Domain layer: role-based authorization gate.

Every permission rule lives in the ``PERMISSIONS`` table and the helpers of
``AuthorizationGate``; the assistant and the REST task routes both go
through the same gate. A rejection always raises ``ForbiddenError``; the
gate never narrows a request into a partial success.
"""
from typing import Any, Dict, FrozenSet, Iterable, List, NamedTuple, Optional

from database.models import Task, User
from teamhub.domain.enums import Role
from teamhub.domain.errors import ForbiddenError
from teamhub.domain.intents import IntentTag

ALL_ROLES: FrozenSet[Role] = frozenset(Role)


class Permission(NamedTuple):
    roles: FrozenSet[Role]
    denial: str


PERMISSIONS: Dict[IntentTag, Permission] = {
    IntentTag.CREATE: Permission(
        frozenset({Role.MANAGER, Role.ADMIN}),
        "Members cannot create tasks. Only Admins and Managers can create tasks.",
    ),
    IntentTag.UPDATE: Permission(ALL_ROLES, "You are not allowed to update tasks"),
    IntentTag.MOVE: Permission(ALL_ROLES, "You are not allowed to move tasks"),
    IntentTag.ASSIGN: Permission(frozenset({Role.MANAGER}), "Only Managers can assign tasks to members"),
    IntentTag.DELETE: Permission(frozenset({Role.ADMIN}), "Only Admins can delete tasks"),
    IntentTag.LIST: Permission(ALL_ROLES, "You are not allowed to list tasks"),
    IntentTag.HELP: Permission(ALL_ROLES, ""),
    IntentTag.UNKNOWN: Permission(ALL_ROLES, ""),
}

# Fields a member may change on a task assigned to them.
MEMBER_MUTABLE_FIELDS = frozenset({"status"})


def role_of(user: User) -> Role:
    return Role(user.role)


class AuthorizationGate:
    """Stateless predicates evaluated before any mutation."""

    def __init__(self, permissions: Optional[Dict[IntentTag, Permission]] = None):
        self.permissions = permissions or PERMISSIONS

    def is_allowed(self, tag: IntentTag, user: User) -> bool:
        permission = self.permissions.get(tag)
        return permission is not None and role_of(user) in permission.roles

    def authorize(self, tag: IntentTag, user: User) -> None:
        if not self.is_allowed(tag, user):
            permission = self.permissions.get(tag)
            raise ForbiddenError(permission.denial if permission else f"'{tag.value}' is not permitted")

    def can_assign(self, user: User) -> bool:
        """Only managers hand out work; admins manage but do not assign."""
        return role_of(user) == Role.MANAGER

    def ensure_can_assign(self, user: User) -> None:
        if not self.can_assign(user):
            raise ForbiddenError("Only Managers can assign tasks. Admins can manage but not assign.")

    def ensure_can_manage_projects(self, user: User) -> None:
        if role_of(user) not in (Role.MANAGER, Role.ADMIN):
            raise ForbiddenError("Only Admins and Managers can create projects")

    def ensure_assignable(self, assignee: User) -> None:
        if role_of(assignee) != Role.MEMBER:
            raise ForbiddenError("Tasks can only be assigned to members")

    def ensure_task_owner(self, user: User, task: Task) -> None:
        """Members may only act on tasks assigned to them."""
        if role_of(user) == Role.MEMBER and task.assigned_to != user.id:
            raise ForbiddenError("You can only update tasks assigned to you")

    def ensure_same_team(self, user: User, team_id: Optional[str], action: str = "access") -> None:
        if team_id is None or user.team_id != team_id:
            raise ForbiddenError(f"You can only {action} tasks in your team's projects")

    def mutable_changes(self, user: User, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Drop the fields the caller's role may not change."""
        if role_of(user) == Role.MEMBER:
            return {field: value for field, value in changes.items() if field in MEMBER_MUTABLE_FIELDS}
        return dict(changes)

    def visible_tasks(self, user: User, tasks: Iterable[Task]) -> List[Task]:
        """Members see tasks assigned to them plus unassigned ones."""
        if role_of(user) != Role.MEMBER:
            return list(tasks)
        return [task for task in tasks if task.assigned_to is None or task.assigned_to == user.id]

    def owned_tasks(self, user: User, tasks: Iterable[Task]) -> List[Task]:
        """Tasks a member may change by name: only the ones assigned to them."""
        if role_of(user) != Role.MEMBER:
            return list(tasks)
        return [task for task in tasks if task.assigned_to == user.id]


# Default gate instance
default_gate = AuthorizationGate()

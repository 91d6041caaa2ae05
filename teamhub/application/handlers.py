"""Application layer: Command handlers implementing business logic.

Each handler executes one intent: ``check`` rejects incomplete intents
before any storage call, ``handle`` performs one lookup and at most one
mutation, pushes a realtime event and returns the result envelope.
"""
import logging
from typing import Optional

from database.models import Task
from teamhub.application.help import HELP_TEXT
from teamhub.domain.authorization import AuthorizationGate
from teamhub.domain.commands import CommandContext, CommandHandler, ResultEnvelope
from teamhub.domain.enums import Role, TaskStatus
from teamhub.domain.errors import BadRequestError, NotFoundError
from teamhub.domain.events import EventDispatcher, TaskDeleted, TaskUpdated
from teamhub.domain.intents import (
    AssignIntent,
    CreateIntent,
    DeleteIntent,
    HelpIntent,
    ListIntent,
    MoveIntent,
    TaskReference,
    UnknownIntent,
    UpdateIntent,
)
from teamhub.domain.resolver import resolve_task, resolve_user
from teamhub.infrastructure.repositories import ProjectRepository, TaskRepository, UserRepository
from teamhub.schemas import TaskSnapshot

logger = logging.getLogger(__name__)


class IntentHandler(CommandHandler):
    """Base handler with the collaborators every task intent needs."""

    # Whether the scoped candidate set must be loaded before ``handle``.
    needs_scope = False
    # Whether title references only match tasks the caller owns.
    owned_only = False

    def __init__(self, tasks: TaskRepository, users: UserRepository, projects: ProjectRepository,
                 gate: AuthorizationGate, events: EventDispatcher):
        self.tasks = tasks
        self.users = users
        self.projects = projects
        self.gate = gate
        self.events = events

    def check(self, intent, context: CommandContext) -> None:
        """Reject an incomplete intent; must not touch storage."""
        pass

    @staticmethod
    def _require_reference(task_ref: Optional[TaskReference], verb: str) -> None:
        if task_ref is None:
            raise BadRequestError(f"Please specify which task to {verb}")

    async def _locate(self, task_ref: TaskReference, context: CommandContext, action: str) -> Task:
        if task_ref.is_direct:
            task = await self.tasks.find_task_by_id(task_ref.task_id)
        else:
            candidates = context.tasks
            if self.owned_only:
                candidates = self.gate.owned_tasks(context.user, candidates)
            task = resolve_task(task_ref, candidates)
        if task is None:
            raise NotFoundError("Task not found")
        self.gate.ensure_same_team(context.user, task.project.team_id if task.project else None, action)
        return task

    def _publish_updated(self, task: Task) -> None:
        if not self.events.attached or task.project is None:
            return
        snapshot = TaskSnapshot.from_task(task).model_dump(mode="json")
        self.events.dispatch(TaskUpdated(team_id=task.project.team_id, task=snapshot))


class CreateTaskHandler(IntentHandler):
    """Handler for creating tasks in the scoped project."""

    def check(self, intent: CreateIntent, context: CommandContext) -> None:
        if not context.project_id:
            raise BadRequestError("Project ID is required to create a task")

    async def handle(self, intent: CreateIntent, context: CommandContext) -> ResultEnvelope:
        project = await self.projects.find_project_by_id(context.project_id)
        if project is None:
            raise NotFoundError("Project not found")
        self.gate.ensure_same_team(context.user, project.team_id, "create")

        warning = ""
        assignee_id = None
        if intent.assignee_name and self.gate.can_assign(context.user):
            candidates = await self.users.find_users_by_team_and_role(context.user.team_id, Role.MEMBER.value)
            assignee = resolve_user(intent.assignee_name, candidates)
            if assignee is not None:
                assignee_id = assignee.id
            else:
                warning = f'Warning: Could not find user "{intent.assignee_name}". Creating task without assignment. '

        task = await self.tasks.create_task({
            "title": intent.title,
            "description": intent.description,
            "status": (intent.status or TaskStatus.TODO).value,
            "project_id": project.id,
            "assigned_to": assignee_id,
        })
        logger.info(f"[ASSISTANT] created task {task.id} in project {project.id}")
        self._publish_updated(task)
        return ResultEnvelope(message=f'{warning}Task "{task.title}" created successfully!', task=task)


class UpdateTaskHandler(IntentHandler):
    """Handler for editing task fields; members may only change status."""

    needs_scope = True
    owned_only = True

    def check(self, intent: UpdateIntent, context: CommandContext) -> None:
        self._require_reference(intent.task_ref, "update")

    async def handle(self, intent: UpdateIntent, context: CommandContext) -> ResultEnvelope:
        task = await self._locate(intent.task_ref, context, "update")
        self.gate.ensure_task_owner(context.user, task)

        requested = {
            "title": intent.title,
            "description": intent.description,
            "status": intent.status.value if intent.status else None,
        }
        changes = self.gate.mutable_changes(
            context.user, {field: value for field, value in requested.items() if value is not None}
        )
        for field, value in changes.items():
            setattr(task, field, value)

        task = await self.tasks.save_task(task)
        logger.info(f"[ASSISTANT] updated task {task.id}: {sorted(changes)}")
        self._publish_updated(task)
        return ResultEnvelope(message=f'Task "{task.title}" updated successfully!', task=task)


class MoveTaskHandler(IntentHandler):
    """Handler for status changes."""

    needs_scope = True
    owned_only = True

    def check(self, intent: MoveIntent, context: CommandContext) -> None:
        self._require_reference(intent.task_ref, "move")
        if intent.status is None:
            raise BadRequestError("Please specify the status to move the task to")

    async def handle(self, intent: MoveIntent, context: CommandContext) -> ResultEnvelope:
        task = await self._locate(intent.task_ref, context, "update")
        self.gate.ensure_task_owner(context.user, task)

        task.status = intent.status.value
        task = await self.tasks.save_task(task)
        logger.info(f"[ASSISTANT] moved task {task.id} to {intent.status.value}")
        self._publish_updated(task)
        return ResultEnvelope(
            message=f'Task "{task.title}" moved to {intent.status.value} successfully!',
            task=task,
        )


class AssignTaskHandler(IntentHandler):
    """Handler for handing a task to a team member."""

    needs_scope = True

    def check(self, intent: AssignIntent, context: CommandContext) -> None:
        self._require_reference(intent.task_ref, "assign")
        if not intent.assignee_name:
            raise BadRequestError("Please specify who to assign the task to")

    async def handle(self, intent: AssignIntent, context: CommandContext) -> ResultEnvelope:
        task = await self._locate(intent.task_ref, context, "assign")

        candidates = await self.users.find_users_by_team_and_role(context.user.team_id, Role.MEMBER.value)
        assignee = resolve_user(intent.assignee_name, candidates)
        if assignee is None:
            raise NotFoundError(f'User "{intent.assignee_name}" not found')
        self.gate.ensure_assignable(assignee)

        task.assigned_to = assignee.id
        task = await self.tasks.save_task(task)
        logger.info(f"[ASSISTANT] assigned task {task.id} to {assignee.id}")
        self._publish_updated(task)
        return ResultEnvelope(message=f'Task "{task.title}" assigned to {assignee.name} successfully!', task=task)


class DeleteTaskHandler(IntentHandler):
    """Handler for removing tasks (admins only, enforced by the gate)."""

    needs_scope = True

    def check(self, intent: DeleteIntent, context: CommandContext) -> None:
        self._require_reference(intent.task_ref, "delete")

    async def handle(self, intent: DeleteIntent, context: CommandContext) -> ResultEnvelope:
        task = await self._locate(intent.task_ref, context, "delete")
        task_id, title = task.id, task.title
        team_id = task.project.team_id if task.project else None

        await self.tasks.delete_task(task_id)
        logger.info(f"[ASSISTANT] deleted task {task_id}")
        if team_id is not None:
            self.events.dispatch(TaskDeleted(team_id=team_id, task_id=task_id))
        return ResultEnvelope(message=f'Task "{title}" deleted successfully!')


class ListTasksHandler(IntentHandler):
    """Handler for listing the scoped tasks with optional filters."""

    needs_scope = True

    async def handle(self, intent: ListIntent, context: CommandContext) -> ResultEnvelope:
        tasks = list(context.tasks)
        if intent.assigned_to_me:
            tasks = [task for task in tasks if task.assigned_to == context.user.id]
        if intent.status is not None:
            tasks = [task for task in tasks if task.status == intent.status.value]

        if not tasks:
            return ResultEnvelope(message="No tasks found matching your criteria.", tasks=[])
        return ResultEnvelope(message=f"Found {len(tasks)} task(s):", tasks=tasks)


class HelpHandler(IntentHandler):
    async def handle(self, intent: HelpIntent, context: CommandContext) -> ResultEnvelope:
        return ResultEnvelope(message=HELP_TEXT)


class UnknownHandler(IntentHandler):
    async def handle(self, intent: UnknownIntent, context: CommandContext) -> ResultEnvelope:
        return ResultEnvelope(message=intent.message)

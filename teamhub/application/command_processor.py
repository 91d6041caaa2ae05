"""Application layer: assistant command processor.

Pipeline per command: parse -> authorize -> check required fields ->
load the scoped candidate set -> execute the intent handler. Every failure
is raised where it is detected and reaches the HTTP boundary unchanged.
"""
import logging
from typing import Dict, List, Optional

from database.models import Task
from teamhub.application.handlers import (
    AssignTaskHandler,
    CreateTaskHandler,
    DeleteTaskHandler,
    HelpHandler,
    IntentHandler,
    ListTasksHandler,
    MoveTaskHandler,
    UnknownHandler,
    UpdateTaskHandler,
)
from teamhub.domain.authorization import AuthorizationGate, default_gate
from teamhub.domain.commands import Command, CommandContext, ResultEnvelope
from teamhub.domain.errors import BadRequestError, NotFoundError
from teamhub.domain.events import EventDispatcher, event_dispatcher
from teamhub.domain.intent_parser import IntentClassifier, default_parser
from teamhub.domain.intents import IntentTag, ParseError
from teamhub.infrastructure.repositories import ProjectRepository, TaskRepository, UserRepository

logger = logging.getLogger(__name__)

_HANDLER_TYPES = {
    IntentTag.CREATE: CreateTaskHandler,
    IntentTag.UPDATE: UpdateTaskHandler,
    IntentTag.MOVE: MoveTaskHandler,
    IntentTag.ASSIGN: AssignTaskHandler,
    IntentTag.DELETE: DeleteTaskHandler,
    IntentTag.LIST: ListTasksHandler,
    IntentTag.HELP: HelpHandler,
    IntentTag.UNKNOWN: UnknownHandler,
}


class AssistantCommandProcessor:
    """Turns free-text commands into authorized task operations."""

    def __init__(self, tasks: TaskRepository, users: UserRepository, projects: ProjectRepository,
                 events: Optional[EventDispatcher] = None,
                 parser: Optional[IntentClassifier] = None,
                 gate: Optional[AuthorizationGate] = None):
        self.tasks = tasks
        self.users = users
        self.projects = projects
        self.events = events or event_dispatcher
        self.parser = parser or default_parser
        self.gate = gate or default_gate

        # Handler cache
        self._handlers: Dict[IntentTag, IntentHandler] = {}

    def _get_handler(self, tag: IntentTag) -> IntentHandler:
        """Get or create handler for intent."""
        if tag not in self._handlers:
            handler_type = _HANDLER_TYPES[tag]
            self._handlers[tag] = handler_type(self.tasks, self.users, self.projects, self.gate, self.events)
        return self._handlers[tag]

    async def _load_scope(self, command: Command) -> List[Task]:
        """Read the tasks the caller may see in the scoped project, once."""
        if not command.project_id:
            return []
        project = await self.projects.find_project_by_id(command.project_id)
        if project is None:
            raise NotFoundError("Project not found")
        self.gate.ensure_same_team(command.user, project.team_id, "access")
        tasks = await self.tasks.find_tasks_by_project(project.id)
        return self.gate.visible_tasks(command.user, tasks)

    async def process(self, command: Command) -> ResultEnvelope:
        if not command.text or not command.text.strip():
            raise BadRequestError("Command is required")

        intent = self.parser.parse(command.text)
        logger.info(f"[ASSISTANT] {intent.tag.value} from {command.user.name}")
        if isinstance(intent, ParseError):
            raise BadRequestError(intent.message)

        self.gate.authorize(intent.tag, command.user)
        handler = self._get_handler(intent.tag)
        context = CommandContext(user=command.user, project_id=command.project_id)
        handler.check(intent, context)
        if handler.needs_scope:
            context.tasks = await self._load_scope(command)
        return await handler.handle(intent, context)

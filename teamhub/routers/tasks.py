"""Task CRUD endpoints sharing the assistant's authorization gate."""
from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from database.models import Project, User
from teamhub import services
from teamhub.dependencies import (
    get_current_user,
    get_project_repository,
    get_task_repository,
    get_user_repository,
)
from teamhub.domain.authorization import default_gate as gate
from teamhub.domain.errors import ForbiddenError, NotFoundError
from teamhub.domain.events import TaskDeleted, TaskUpdated
from teamhub.domain.intents import IntentTag
from teamhub.infrastructure.repositories import ProjectRepository, TaskRepository, UserRepository
from teamhub.schemas import (
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskSnapshot,
    TaskUpdateRequest,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


async def _check_assignee(assignee_id: str, project: Project, users: UserRepository) -> None:
    assignee = await users.find_user_by_id(assignee_id)
    if assignee is None or assignee.team_id != project.team_id:
        raise ForbiddenError("Cannot assign task to user outside the team")
    gate.ensure_assignable(assignee)


def _publish(event) -> None:
    services.event_dispatcher.dispatch(event)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    projects: ProjectRepository = Depends(get_project_repository),
):
    if project_id:
        project = await projects.find_project_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if user.team_id != project.team_id:
            raise ForbiddenError("You do not have access to this project's tasks")
        found = await tasks.find_tasks_by_project(project.id)
    else:
        found = [task for task in await tasks.find_all_tasks()
                 if task.project is not None and task.project.team_id == user.team_id]

    visible = gate.visible_tasks(user, found)
    return TaskListResponse(
        message="Tasks retrieved successfully",
        tasks=[TaskSnapshot.from_task(task) for task in visible],
    )


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    payload: TaskCreateRequest,
    user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    users: UserRepository = Depends(get_user_repository),
    projects: ProjectRepository = Depends(get_project_repository),
):
    gate.authorize(IntentTag.CREATE, user)
    project = await projects.find_project_by_id(payload.project_id)
    if project is None:
        raise NotFoundError("Project not found")
    gate.ensure_same_team(user, project.team_id, "create")

    if payload.assigned_to:
        gate.ensure_can_assign(user)
        await _check_assignee(payload.assigned_to, project, users)

    task = await tasks.create_task({
        "title": payload.title,
        "description": payload.description,
        "status": payload.status.value,
        "project_id": project.id,
        "assigned_to": payload.assigned_to,
    })
    snapshot = TaskSnapshot.from_task(task)
    logger.info(f"[TASKS] {user.id} created task {task.id}")
    _publish(TaskUpdated(team_id=project.team_id, task=snapshot.model_dump(mode="json")))
    return TaskResponse(message="Task created successfully", task=snapshot)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    payload: TaskUpdateRequest,
    user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    users: UserRepository = Depends(get_user_repository),
):
    task = await tasks.find_task_by_id(task_id.lower())
    if task is None:
        raise NotFoundError("Task not found")
    project = task.project
    gate.ensure_same_team(user, project.team_id, "update")
    gate.ensure_task_owner(user, task)

    changes = payload.model_dump(exclude_unset=True)
    if "assigned_to" in changes:
        gate.ensure_can_assign(user)
        if changes["assigned_to"]:
            await _check_assignee(changes["assigned_to"], project, users)
    if changes.get("status") is not None:
        changes["status"] = changes["status"].value

    for field, value in gate.mutable_changes(user, changes).items():
        setattr(task, field, value)
    task = await tasks.save_task(task)

    snapshot = TaskSnapshot.from_task(task)
    logger.info(f"[TASKS] {user.id} updated task {task.id}")
    _publish(TaskUpdated(team_id=project.team_id, task=snapshot.model_dump(mode="json")))
    return TaskResponse(message="Task updated successfully", task=snapshot)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    task = await tasks.find_task_by_id(task_id.lower())
    if task is None:
        raise NotFoundError("Task not found")
    deleted_id, team_id = task.id, task.project.team_id
    gate.ensure_same_team(user, team_id, "delete")
    gate.authorize(IntentTag.DELETE, user)

    await tasks.delete_task(deleted_id)
    logger.info(f"[TASKS] {user.id} deleted task {deleted_id}")
    _publish(TaskDeleted(team_id=team_id, task_id=deleted_id))
    return {"message": "Task deleted successfully"}

"""Pydantic models for request/response bodies.

Request bodies accept the camelCase keys web clients send (``projectId``,
``assignedTo``) as well as their snake_case field names.
"""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from database.models import Message, Project, Task, Team, User
from teamhub.domain.enums import Role, TaskStatus


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --------------------------------------------------------------------- #
# Snapshots
# --------------------------------------------------------------------- #
class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.name, email=user.email)


class UserSnapshot(UserSummary):
    role: Role
    team_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserSnapshot":
        return cls(id=user.id, name=user.name, email=user.email, role=Role(user.role), team_id=user.team_id)


class ProjectSummary(BaseModel):
    id: str
    name: str


class ProjectSnapshot(ProjectSummary):
    description: Optional[str] = None
    team_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSnapshot":
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            team_id=project.team_id,
            created_at=project.created_at,
        )


class TaskSnapshot(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    project: Optional[ProjectSummary] = None
    assigned_to: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskSnapshot":
        project = task.project
        assignee = task.assignee
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=TaskStatus(task.status),
            project=ProjectSummary(id=project.id, name=project.name) if project else None,
            assigned_to=UserSummary.from_user(assignee) if assignee else None,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TeamSnapshot(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    admin: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_team(cls, team: Team, admin: Optional[User] = None) -> "TeamSnapshot":
        return cls(
            id=team.id,
            name=team.name,
            description=team.description,
            admin=UserSummary.from_user(admin) if admin else None,
            created_at=team.created_at,
        )


class MessageSnapshot(BaseModel):
    id: str
    content: str
    sender: Optional[UserSnapshot] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_message(cls, message: Message) -> "MessageSnapshot":
        return cls(
            id=message.id,
            content=message.content,
            sender=UserSnapshot.from_user(message.sender) if message.sender else None,
            timestamp=message.timestamp,
        )


# --------------------------------------------------------------------- #
# Assistant
# --------------------------------------------------------------------- #
class AssistantRequest(_RequestModel):
    command: str = Field(default="", description="Free-text command, e.g. \"move task 'Fix login' to done\"")
    project_id: Optional[str] = Field(default=None, alias="projectId")


class AssistantResponse(BaseModel):
    message: str
    task: Optional[TaskSnapshot] = None
    tasks: Optional[List[TaskSnapshot]] = None


# --------------------------------------------------------------------- #
# Task CRUD
# --------------------------------------------------------------------- #
class TaskCreateRequest(_RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    project_id: str = Field(alias="projectId")
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class TaskUpdateRequest(_RequestModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")


class TaskResponse(BaseModel):
    message: str
    task: TaskSnapshot


class TaskListResponse(BaseModel):
    message: str
    tasks: List[TaskSnapshot]


# --------------------------------------------------------------------- #
# Teams, projects, users, messages
# --------------------------------------------------------------------- #
class TeamCreateRequest(_RequestModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class TeamResponse(BaseModel):
    message: str
    team: Optional[TeamSnapshot] = None
    members: List[UserSnapshot] = Field(default_factory=list)


class ProjectCreateRequest(_RequestModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class UserCreateRequest(_RequestModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    role: Role = Role.MEMBER
    team_id: Optional[str] = Field(default=None, alias="teamId")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain @")
        return v


class MessageCreateRequest(_RequestModel):
    content: str = Field(min_length=1, max_length=2000)


class MessageListResponse(BaseModel):
    messages: List[MessageSnapshot]
    count: int

"""Infrastructure layer: Repository interfaces and implementations.

The interfaces are asynchronous; every call is a suspend point for the
command pipeline even when the backing store answers synchronously.
Storage errors are not caught here and reach the caller unchanged.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from database.models import Team, User, Project, Task, Message


class TaskRepository(ABC):
    """Repository interface for Task operations."""

    @abstractmethod
    async def find_tasks_by_project(self, project_id: str) -> List[Task]:
        """Tasks of one project in creation order."""
        pass

    @abstractmethod
    async def find_all_tasks(self) -> List[Task]:
        pass

    @abstractmethod
    async def find_task_by_id(self, task_id: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def create_task(self, fields: Dict[str, Any]) -> Task:
        pass

    @abstractmethod
    async def save_task(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def delete_task(self, task_id: str) -> None:
        pass


class UserRepository(ABC):
    """Repository interface for User operations."""

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_users_by_team_and_role(self, team_id: str, role: str) -> List[User]:
        pass

    @abstractmethod
    async def find_users_by_team(self, team_id: str) -> List[User]:
        pass

    @abstractmethod
    async def find_all_users(self) -> List[User]:
        pass

    @abstractmethod
    async def create_user(self, fields: Dict[str, Any]) -> User:
        pass

    @abstractmethod
    async def save_user(self, user: User) -> User:
        pass


class ProjectRepository(ABC):
    """Repository interface for Project operations."""

    @abstractmethod
    async def find_project_by_id(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    async def find_projects_by_team(self, team_id: str) -> List[Project]:
        pass

    @abstractmethod
    async def create_project(self, fields: Dict[str, Any]) -> Project:
        pass


class TeamRepository(ABC):
    """Repository interface for Team operations."""

    @abstractmethod
    async def find_team_by_id(self, team_id: str) -> Optional[Team]:
        pass

    @abstractmethod
    async def create_team(self, fields: Dict[str, Any]) -> Team:
        pass


class MessageRepository(ABC):
    """Repository interface for chat Message operations."""

    @abstractmethod
    async def create_message(self, fields: Dict[str, Any]) -> Message:
        pass

    @abstractmethod
    async def find_latest_messages(self, limit: int) -> List[Message]:
        """Newest ``limit`` messages, oldest first."""
        pass


class _SqlAlchemyRepository:
    def __init__(self, db: Session):
        self.db = db

    def _persist(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance


class SqlAlchemyTaskRepository(_SqlAlchemyRepository, TaskRepository):
    """SQLAlchemy implementation of TaskRepository."""

    async def find_tasks_by_project(self, project_id: str) -> List[Task]:
        return self.db.query(Task).filter(Task.project_id == project_id).order_by(Task.created_at).all()

    async def find_all_tasks(self) -> List[Task]:
        return self.db.query(Task).order_by(Task.created_at).all()

    async def find_task_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    async def create_task(self, fields: Dict[str, Any]) -> Task:
        return self._persist(Task(**fields))

    async def save_task(self, task: Task) -> Task:
        return self._persist(task)

    async def delete_task(self, task_id: str) -> None:
        self.db.query(Task).filter(Task.id == task_id).delete()
        self.db.commit()


class SqlAlchemyUserRepository(_SqlAlchemyRepository, UserRepository):
    """SQLAlchemy implementation of UserRepository."""

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    async def find_users_by_team_and_role(self, team_id: str, role: str) -> List[User]:
        return self.db.query(User).filter(
            User.team_id == team_id,
            User.role == role
        ).order_by(User.created_at).all()

    async def find_users_by_team(self, team_id: str) -> List[User]:
        return self.db.query(User).filter(User.team_id == team_id).order_by(User.created_at).all()

    async def find_all_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at).all()

    async def create_user(self, fields: Dict[str, Any]) -> User:
        return self._persist(User(**fields))

    async def save_user(self, user: User) -> User:
        return self._persist(user)


class SqlAlchemyProjectRepository(_SqlAlchemyRepository, ProjectRepository):
    """SQLAlchemy implementation of ProjectRepository."""

    async def find_project_by_id(self, project_id: str) -> Optional[Project]:
        return self.db.query(Project).filter(Project.id == project_id).first()

    async def find_projects_by_team(self, team_id: str) -> List[Project]:
        return self.db.query(Project).filter(Project.team_id == team_id).order_by(Project.created_at).all()

    async def create_project(self, fields: Dict[str, Any]) -> Project:
        return self._persist(Project(**fields))


class SqlAlchemyTeamRepository(_SqlAlchemyRepository, TeamRepository):
    """SQLAlchemy implementation of TeamRepository."""

    async def find_team_by_id(self, team_id: str) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    async def create_team(self, fields: Dict[str, Any]) -> Team:
        return self._persist(Team(**fields))


class SqlAlchemyMessageRepository(_SqlAlchemyRepository, MessageRepository):
    """SQLAlchemy implementation of MessageRepository."""

    async def create_message(self, fields: Dict[str, Any]) -> Message:
        return self._persist(Message(**fields))

    async def find_latest_messages(self, limit: int) -> List[Message]:
        latest = self.db.query(Message).order_by(Message.timestamp.desc()).limit(limit).all()
        return list(reversed(latest))

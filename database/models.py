from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator, CHAR
import uuid
from datetime import datetime

from teamhub.domain.enums import Role, TaskStatus


def new_object_id() -> str:
    """Return a fresh 24-character lower-case hex identifier."""
    return uuid.uuid4().hex[:24]


class HexId(TypeDecorator):
    """24-character hex identifier stored as CHAR(24).

    Values are normalized to lower case so lookups by an id typed in a
    command ("task 65A0...") hit the stored row.
    """
    impl = CHAR(24)
    cache_ok = True

    def process_bind_param(self, value, dialect):  # pragma: no cover - trivial
        if value is None:
            return value
        return str(value).strip().lower()

    def process_result_value(self, value, dialect):  # pragma: no cover - trivial
        return value

Base = declarative_base()

class Team(Base):
    __tablename__ = "teams"

    id = Column(HexId(), primary_key=True, default=new_object_id)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    admin_id = Column(HexId(), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    members = relationship("User", back_populates="team", foreign_keys="User.team_id")
    projects = relationship("Project", back_populates="team")

class User(Base):
    __tablename__ = "users"

    id = Column(HexId(), primary_key=True, default=new_object_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(String(20), nullable=False, default=Role.MEMBER.value)
    team_id = Column(HexId(), ForeignKey("teams.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    team = relationship("Team", back_populates="members", foreign_keys=[team_id])

class Project(Base):
    __tablename__ = "projects"

    id = Column(HexId(), primary_key=True, default=new_object_id)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    team_id = Column(HexId(), ForeignKey("teams.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    team = relationship("Team", back_populates="projects")
    tasks = relationship("Task", back_populates="project")

class Task(Base):
    __tablename__ = "tasks"

    id = Column(HexId(), primary_key=True, default=new_object_id)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value)
    project_id = Column(HexId(), ForeignKey("projects.id"), nullable=False)
    assigned_to = Column(HexId(), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assigned_to])

class Message(Base):
    __tablename__ = "messages"

    id = Column(HexId(), primary_key=True, default=new_object_id)
    content = Column(Text, nullable=False)
    sender_id = Column(HexId(), ForeignKey("users.id"), nullable=False)
    team_id = Column(HexId(), ForeignKey("teams.id"), nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow)

    sender = relationship("User")

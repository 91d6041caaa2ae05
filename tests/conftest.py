"""
Pytest configuration and shared fixtures for TeamHub tests.
"""
import os

# Must be set before the application modules build their engine and settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ.pop("ADMIN_API_KEY", None)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from database.models import Base, Team, User, Project, Task, Message
from database.connection import get_db
from teamhub import services
from teamhub.application.command_processor import AssistantCommandProcessor
from teamhub.domain.events import EventDispatcher
from teamhub.infrastructure.repositories import (
    SqlAlchemyMessageRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyTaskRepository,
    SqlAlchemyTeamRepository,
    SqlAlchemyUserRepository,
)
from main import app


@pytest.fixture(scope="session")
def test_db_engine():
    """Create a test database engine using SQLite in memory."""
    # StaticPool keeps one connection so TestClient threads and direct sessions share the data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a fresh database session for each test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Clean up tables between tests
        with test_db_engine.connect() as connection:
            with connection.begin():
                for table in reversed(Base.metadata.sorted_tables):
                    connection.execute(table.delete())


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""

    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


def _add(session, instance):
    session.add(instance)
    session.commit()
    session.refresh(instance)
    return instance


@pytest.fixture
def sample_team(test_db_session):
    """Create a sample team for testing."""
    return _add(test_db_session, Team(name="Product Team", description="Builds the web app"))


@pytest.fixture
def other_team(test_db_session):
    return _add(test_db_session, Team(name="Ops Team"))


@pytest.fixture
def admin_user(test_db_session, sample_team):
    admin = _add(test_db_session, User(
        name="Alice Admin", email="alice@example.com", role="admin", team_id=sample_team.id
    ))
    sample_team.admin_id = admin.id
    test_db_session.commit()
    return admin


@pytest.fixture
def manager_user(test_db_session, sample_team):
    return _add(test_db_session, User(
        name="Mark Manager", email="mark@example.com", role="manager", team_id=sample_team.id
    ))


@pytest.fixture
def member_user(test_db_session, sample_team):
    return _add(test_db_session, User(
        name="Sarah Connor", email="sarah@example.com", role="member", team_id=sample_team.id
    ))


@pytest.fixture
def second_member(test_db_session, sample_team):
    return _add(test_db_session, User(
        name="Tom Baker", email="tom@example.com", role="member", team_id=sample_team.id
    ))


@pytest.fixture
def outsider(test_db_session, other_team):
    """A manager belonging to a different team."""
    return _add(test_db_session, User(
        name="Olga Outsider", email="olga@example.com", role="manager", team_id=other_team.id
    ))


@pytest.fixture
def sample_project(test_db_session, sample_team):
    return _add(test_db_session, Project(name="Website", description="Public site", team_id=sample_team.id))


@pytest.fixture
def other_project(test_db_session, other_team):
    return _add(test_db_session, Project(name="Infrastructure", team_id=other_team.id))


@pytest.fixture
def sample_task(test_db_session, sample_project, member_user):
    """A task assigned to the sample member."""
    return _add(test_db_session, Task(
        title="Fix login",
        description="Users cannot sign in",
        status="todo",
        project_id=sample_project.id,
        assigned_to=member_user.id,
    ))


@pytest.fixture
def unassigned_task(test_db_session, sample_project):
    return _add(test_db_session, Task(title="Write docs", status="todo", project_id=sample_project.id))


@pytest.fixture
def other_member_task(test_db_session, sample_project, second_member):
    return _add(test_db_session, Task(
        title="Deploy app", status="in-progress", project_id=sample_project.id, assigned_to=second_member.id
    ))


@pytest.fixture
def sample_message(test_db_session, member_user):
    return _add(test_db_session, Message(content="Hello team", sender_id=member_user.id))


class RecordingNotifier:
    """Notifier fake that remembers every publish call."""

    def __init__(self):
        self.published = []

    def publish(self, topic, event, payload):
        self.published.append((topic, event, payload))

    def events(self):
        return [event for _, event, _ in self.published]


class FailingNotifier:
    def publish(self, topic, event, payload):
        raise ConnectionError("push channel down")


@pytest.fixture
def recording_notifier():
    """Attach a recording notifier to the application-wide dispatcher."""
    notifier = RecordingNotifier()
    services.event_dispatcher.attach(notifier)
    yield notifier
    services.event_dispatcher.detach(notifier)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def dispatcher(notifier):
    """A private dispatcher with the recording notifier attached."""
    events = EventDispatcher()
    events.attach(notifier)
    return events


@pytest.fixture
def repositories(test_db_session):
    return {
        "tasks": SqlAlchemyTaskRepository(test_db_session),
        "users": SqlAlchemyUserRepository(test_db_session),
        "projects": SqlAlchemyProjectRepository(test_db_session),
        "teams": SqlAlchemyTeamRepository(test_db_session),
        "messages": SqlAlchemyMessageRepository(test_db_session),
    }


@pytest.fixture
def processor(repositories, dispatcher):
    """Assistant command processor over the test database."""
    return AssistantCommandProcessor(
        repositories["tasks"],
        repositories["users"],
        repositories["projects"],
        events=dispatcher,
    )


# Utility functions for tests
def auth_headers(user):
    """Identity header normally injected by the auth gateway."""
    return {"X-User-Id": user.id}


def assistant_payload(command, project=None):
    payload = {"command": command}
    if project is not None:
        payload["projectId"] = project.id
    return payload

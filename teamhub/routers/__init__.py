"""Aggregate FastAPI routers for inclusion in the application."""
from . import assistant, tasks, teams, projects, messages, admin, health, realtime

all_routers = [
    assistant.router,
    tasks.router,
    teams.router,
    projects.router,
    messages.router,
    admin.router,
    health.router,
    realtime.router,
]

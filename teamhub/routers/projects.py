from fastapi import APIRouter, Depends
import logging

from database.models import User
from teamhub.dependencies import get_current_user, get_project_repository
from teamhub.domain.authorization import default_gate as gate
from teamhub.domain.errors import BadRequestError
from teamhub.infrastructure.repositories import ProjectRepository
from teamhub.schemas import ProjectCreateRequest, ProjectSnapshot

router = APIRouter(prefix="/api/projects", tags=["projects"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201)
async def create_project(
    payload: ProjectCreateRequest,
    user: User = Depends(get_current_user),
    projects: ProjectRepository = Depends(get_project_repository),
):
    gate.ensure_can_manage_projects(user)
    if not user.team_id:
        raise BadRequestError("Join or create a team before adding projects")

    project = await projects.create_project({
        "name": payload.name,
        "description": payload.description,
        "team_id": user.team_id,
    })
    logger.info(f"📁 Project {project.id} created in team {project.team_id}")
    return {"message": "Project created successfully", "project": ProjectSnapshot.from_project(project)}


@router.get("")
async def list_projects(
    user: User = Depends(get_current_user),
    projects: ProjectRepository = Depends(get_project_repository),
):
    found = await projects.find_projects_by_team(user.team_id) if user.team_id else []
    return {
        "message": "Projects retrieved successfully",
        "projects": [ProjectSnapshot.from_project(project) for project in found],
    }

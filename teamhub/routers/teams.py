from fastapi import APIRouter, Depends
import logging

from database.models import User
from teamhub.dependencies import get_current_user, get_team_repository, get_user_repository
from teamhub.domain.errors import ForbiddenError, NotFoundError
from teamhub.infrastructure.repositories import TeamRepository, UserRepository
from teamhub.schemas import TeamCreateRequest, TeamResponse, TeamSnapshot, UserSnapshot

router = APIRouter(prefix="/api/teams", tags=["teams"])
logger = logging.getLogger(__name__)


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    payload: TeamCreateRequest,
    user: User = Depends(get_current_user),
    teams: TeamRepository = Depends(get_team_repository),
    users: UserRepository = Depends(get_user_repository),
):
    if user.team_id:
        raise ForbiddenError("You are already part of a team")

    team = await teams.create_team({"name": payload.name, "description": payload.description, "admin_id": user.id})
    user.team_id = team.id
    user = await users.save_user(user)
    logger.info(f"👥 Team {team.id} created by {user.id}")
    return TeamResponse(
        message="Team created successfully",
        team=TeamSnapshot.from_team(team, admin=user),
        members=[UserSnapshot.from_user(user)],
    )


@router.get("/my-team", response_model=TeamResponse)
async def get_my_team(
    user: User = Depends(get_current_user),
    teams: TeamRepository = Depends(get_team_repository),
    users: UserRepository = Depends(get_user_repository),
):
    if not user.team_id:
        return TeamResponse(message="User has no team", team=None, members=[])

    team = await teams.find_team_by_id(user.team_id)
    if team is None:
        raise NotFoundError("Team not found")
    admin = await users.find_user_by_id(team.admin_id) if team.admin_id else None
    members = await users.find_users_by_team(team.id)
    return TeamResponse(
        message="Team retrieved successfully",
        team=TeamSnapshot.from_team(team, admin=admin),
        members=[UserSnapshot.from_user(member) for member in members],
    )


@router.get("/members/all")
async def get_all_members(
    user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    members = await users.find_all_users()
    return {
        "message": "Members retrieved successfully",
        "members": [UserSnapshot.from_user(member) for member in members],
    }


@router.get("/{team_id}/members")
async def get_team_members(
    team_id: str,
    user: User = Depends(get_current_user),
    teams: TeamRepository = Depends(get_team_repository),
    users: UserRepository = Depends(get_user_repository),
):
    team = await teams.find_team_by_id(team_id.lower())
    if team is None:
        raise NotFoundError("Team not found")
    if user.team_id != team.id:
        raise ForbiddenError("You do not have access to this team")

    members = await users.find_users_by_team(team.id)
    return {
        "message": "Team members retrieved successfully",
        "members": [UserSnapshot.from_user(member) for member in members],
    }

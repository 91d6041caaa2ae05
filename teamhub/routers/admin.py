from fastapi import APIRouter, Depends
import logging

from teamhub.dependencies import get_team_repository, get_user_repository, require_admin_key
from teamhub.domain.errors import BadRequestError, NotFoundError
from teamhub.infrastructure.repositories import TeamRepository, UserRepository
from teamhub.schemas import UserCreateRequest, UserSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_key)])


@router.post("/users", status_code=201)
async def add_user(
    payload: UserCreateRequest,
    users: UserRepository = Depends(get_user_repository),
    teams: TeamRepository = Depends(get_team_repository),
):
    """Register a user; identity issuance itself lives in the auth gateway."""
    team_id = payload.team_id.lower() if payload.team_id else None
    if team_id and await teams.find_team_by_id(team_id) is None:
        raise NotFoundError("Team not found")
    if any(existing.email == payload.email for existing in await users.find_all_users()):
        raise BadRequestError(f"A user with email {payload.email} already exists")

    user = await users.create_user({
        "name": payload.name,
        "email": payload.email,
        "role": payload.role.value,
        "team_id": team_id,
    })
    logger.info(f"👤 Added {user.role} {user.name} ({user.id})")
    return {"success": True, "user": UserSnapshot.from_user(user)}

"""Natural-language task assistant endpoint."""
from fastapi import APIRouter, Depends
import logging

from database.models import User
from teamhub.application.command_processor import AssistantCommandProcessor
from teamhub.dependencies import get_command_processor, get_current_user
from teamhub.domain.commands import Command, ResultEnvelope
from teamhub.schemas import AssistantRequest, AssistantResponse, TaskSnapshot

router = APIRouter(prefix="/api/tasks", tags=["assistant"])
logger = logging.getLogger(__name__)


def envelope_to_response(result: ResultEnvelope) -> AssistantResponse:
    return AssistantResponse(
        message=result.message,
        task=TaskSnapshot.from_task(result.task) if result.task is not None else None,
        tasks=[TaskSnapshot.from_task(task) for task in result.tasks] if result.tasks is not None else None,
    )


@router.post("/assistant", response_model=AssistantResponse)
async def handle_assistant(
    payload: AssistantRequest,
    user: User = Depends(get_current_user),
    processor: AssistantCommandProcessor = Depends(get_command_processor),
):
    """Interpret a free-text task command for the calling user."""
    result = await processor.process(Command(text=payload.command, user=user, project_id=payload.project_id))
    return envelope_to_response(result)

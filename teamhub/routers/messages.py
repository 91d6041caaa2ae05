from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from database.models import User
from teamhub import services
from teamhub.config import get_settings
from teamhub.dependencies import get_current_user, get_message_repository
from teamhub.domain.events import MessagePosted
from teamhub.infrastructure.repositories import MessageRepository
from teamhub.schemas import MessageCreateRequest, MessageListResponse, MessageSnapshot

router = APIRouter(prefix="/api/messages", tags=["messages"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201)
async def send_message(
    payload: MessageCreateRequest,
    user: User = Depends(get_current_user),
    messages: MessageRepository = Depends(get_message_repository),
):
    """Post to the global chat; every connected user receives it."""
    message = await messages.create_message({"content": payload.content, "sender_id": user.id, "team_id": None})
    snapshot = MessageSnapshot.from_message(message)
    services.event_dispatcher.dispatch(MessagePosted(message=snapshot.model_dump(mode="json")))
    return {"message": "Message sent successfully", "data": snapshot}


@router.get("", response_model=MessageListResponse)
async def get_messages(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),
    messages: MessageRepository = Depends(get_message_repository),
):
    found = await messages.find_latest_messages(limit or get_settings().message_history_limit)
    return MessageListResponse(
        messages=[MessageSnapshot.from_message(message) for message in found],
        count=len(found),
    )

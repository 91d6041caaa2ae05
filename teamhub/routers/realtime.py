"""WebSocket stream delivering realtime hub events to a connected user."""
import asyncio
import contextlib
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from database.connection import get_db
from teamhub import services
from teamhub.domain.events import GLOBAL_TOPIC, team_topic
from teamhub.infrastructure.repositories import SqlAlchemyUserRepository

router = APIRouter()
logger = logging.getLogger(__name__)


async def _forward(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message)


async def stop_forwarder(forwarder: asyncio.Task) -> None:
    """Cancel the forwarder and collect its outcome, including a failed send."""
    forwarder.cancel()
    with contextlib.suppress(Exception, asyncio.CancelledError):
        await forwarder


@router.websocket("/ws")
async def realtime_stream(websocket: WebSocket, user_id: str, db: Session = Depends(get_db)):
    """Subscribe the caller to the global chat and their team's task events."""
    user = await SqlAlchemyUserRepository(db).find_user_by_id(user_id.strip().lower())
    hub = services.realtime_hub
    if user is None or hub is None:
        await websocket.close(code=1008)
        return

    topics = [GLOBAL_TOPIC]
    if user.team_id:
        topics.append(team_topic(user.team_id))
    queue = hub.subscribe(topics[0])
    for topic in topics[1:]:
        hub.subscribe(topic, queue)

    forwarder = None
    try:
        await websocket.accept()
        forwarder = asyncio.create_task(_forward(websocket, queue))
        while True:
            # Clients may send keep-alive frames; their content is ignored.
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"[REALTIME] {user.id} disconnected")
    finally:
        if forwarder is not None:
            await stop_forwarder(forwarder)
        for topic in topics:
            hub.unsubscribe(topic, queue)

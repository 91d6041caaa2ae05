"""Liveness and readiness probes."""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.connection import get_db
from teamhub import services
from teamhub.config import get_settings
from teamhub.domain.events import GLOBAL_TOPIC

router = APIRouter(tags=["health"])


def _stamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health():
    """Always ok while the process serves requests."""
    hub = services.realtime_hub
    return {
        "status": "ok",
        "ts": _stamp(),
        "environment": get_settings().environment,
        "realtime": hub is not None,
        "chat_listeners": hub.subscriber_count(GLOBAL_TOPIC) if hub else 0,
    }


@router.get("/readiness")
async def readiness(db: Session = Depends(get_db)):
    """Ready once the task store answers a trivial query."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {"ready": False, "ts": _stamp(), "database": f"error: {e}"}
    return {"ready": True, "ts": _stamp(), "database": "connected"}

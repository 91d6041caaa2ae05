"""
TeamHub
FastAPI app: team task board with a natural-language task assistant,
global chat and realtime push.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uuid
from contextlib import asynccontextmanager
import logging

from database.connection import create_tables
from teamhub import services
from teamhub.config import get_settings
from teamhub.domain.errors import TeamHubError
from teamhub.routers import all_routers

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    create_tables()
    logger.info(f"🚀 TeamHub started ({settings.environment})")
    yield
    logger.info("👋 Lifespan shutdown")


app = FastAPI(
    title="TeamHub",
    description="Team task board with a natural-language task assistant",
    version="1.0.0",
    lifespan=lifespan,
)


def _include_routers(app: FastAPI):
    for router in all_routers:
        app.include_router(router)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):  # pragma: no cover
    rid = str(uuid.uuid4())
    request.state.request_id = rid
    response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    return response


@app.exception_handler(TeamHubError)
async def teamhub_error_handler(request: Request, exc: TeamHubError):
    if exc.status_code >= 500:  # pragma: no cover
        logger.error(f"❌ {exc.__class__.__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception("Unhandled error")
    return JSONResponse(status_code=500, content={
        "error": {"type": exc.__class__.__name__, "message": str(exc)},
        "request_id": getattr(request.state, "request_id", None)
    })


_include_routers(app)


@app.get("/")
async def root():
    return {
        "name": "TeamHub",
        "description": "Team tasks, assistant commands and global chat",
        "version": "1.0.0",
        "realtime_enabled": services.realtime_hub is not None,
    }


if __name__ == "__main__":  # pragma: no cover
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)

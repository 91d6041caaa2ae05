import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamhub.config import get_settings
from .models import Base

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url

def _build_engine(url: str):
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared in-memory database for every thread (TestClient + direct sessions)
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    elif url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    elif url.startswith("postgresql"):
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=300,
            connect_args={"connect_timeout": 10}
        )
    return create_engine(url)

engine = _build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
logger.info(f"Database engine created for: {DATABASE_URL.split('://')[0]}://...")

def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

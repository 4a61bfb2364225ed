import logging
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str):
    """Create an engine with pool options suited to the backend."""
    if database_url.startswith("sqlite"):
        # SQLite connections are shared across FastAPI's threadpool
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,  # Connection pool size
        max_overflow=20  # Allow up to 20 connections beyond pool_size
    )


# Create SQLAlchemy engine
engine = build_engine(settings.DATABASE_URL)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, default_categories=()):
    """
    Initialize database.

    Schema migrations are not managed by this service; tables are created
    directly from the model metadata if they do not exist yet. Missing
    ``default_categories`` are inserted afterwards.
    """
    from app import models  # noqa: F401  Import models to register them
    from app.crud import category as category_crud

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    if default_categories:
        db = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
        try:
            created = category_crud.seed_defaults(db, default_categories)
            if created:
                logger.info(f"Seeded {len(created)} categories")
        finally:
            db.close()

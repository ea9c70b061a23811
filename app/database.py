"""
Database configuration
SQLAlchemy setup (PostgreSQL in production, SQLite for local runs)
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool
from typing import Generator, Optional
import logging

from app.config import settings

logger = logging.getLogger(__name__)

# Session factory, bound to the engine once it exists
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False
)

# Base for the models
Base = declarative_base()

_engine: Optional[Engine] = None


def configure_engine(database_url: str = None) -> Engine:
    """
    Creates the process-wide engine and binds the session factory to it.
    Replaces (and disposes) any engine created earlier.
    """
    global _engine

    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.debug
        )
    else:
        engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # check connections before handing them out
            pool_recycle=3600,
            echo=settings.debug
        )

    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        logger.debug("New database connection established")

    if _engine is not None:
        _engine.dispose()

    _engine = engine
    SessionLocal.configure(bind=engine)
    return engine


def get_engine() -> Engine:
    """Returns the shared engine, creating it on first use."""
    if _engine is None:
        configure_engine()
    return _engine


def dispose_engine():
    """Closes every pooled connection. Called on application shutdown."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency
    Opens one session per request and closes it afterwards

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            ...
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Creates all tables that do not exist yet
    """
    logger.info("Initializing database...")

    # Import the models so they are registered on Base.metadata
    from app.models import noc  # noqa: F401

    Base.metadata.create_all(bind=get_engine())

    logger.info("✅ Database initialized")


class DatabaseSession:
    """
    Context manager for sessions used outside a request

    Usage:
        with DatabaseSession() as db:
            noc = db.query(NocCertificate).first()
    """

    def __enter__(self) -> Session:
        get_engine()
        self.db = SessionLocal()
        return self.db

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.db.rollback()
            logger.error(f"Database transaction failed: {exc_val}")
        self.db.close()

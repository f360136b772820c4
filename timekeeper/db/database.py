"""Database connection and session management.

Supports SQLite (default, local-dev and tests) and MySQL (production) based
on settings.database_type.

Usage:
    from timekeeper.db.database import get_db

    @router.get("/state")
    async def get_state(db: Session = Depends(get_db)):
        ...
"""

from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from timekeeper.settings import settings
from timekeeper.utils import get_logger

logger = get_logger(__name__)


def _build_database_url() -> str:
    url = settings.get_database_url_auto()

    # Convert mysql:// to mysql+pymysql:// if needed
    if url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+pymysql://", 1)

    return url


def create_db_engine(database_url: str) -> Engine:
    """Create an engine configured for the given backend.

    In-memory SQLite shares a single connection (StaticPool) so every session
    sees the same tables. SQLite foreign keys are switched on per connection.
    """
    is_sqlite = database_url.startswith("sqlite")
    engine_kwargs = {
        "echo": settings.debug and settings.environment == "local-dev" and not is_sqlite,
    }

    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(
            {
                "pool_size": settings.mysql_pool_size,
                "max_overflow": settings.mysql_max_overflow,
                "pool_pre_ping": settings.mysql_pool_pre_ping,
                "pool_recycle": 3600,  # Recycle connections after 1 hour
            }
        )

    db_engine = create_engine(database_url, **engine_kwargs)

    if is_sqlite:

        @event.listens_for(db_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    else:

        @event.listens_for(db_engine, "connect")
        def set_connection_timeout(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("SET SESSION wait_timeout = 28800")  # 8 hours
            cursor.close()

    return db_engine


_database_url = _build_database_url()
if _database_url.startswith("sqlite"):
    logger.info(f"Using SQLite database: {_database_url}")
else:
    logger.info(f"Using MySQL database: {_database_url.split('@')[1] if '@' in _database_url else 'unknown'}")

engine: Engine = create_db_engine(_database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Get database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection() -> bool:
    """Check if database connection is working."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def init_db(bind: Engine | None = None) -> None:
    """Create tables if they do not exist. Called at application startup."""
    from timekeeper.db.models import Base

    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def close_db() -> None:
    """Close database connections. Called at application shutdown."""
    engine.dispose()
    logger.info("Database connections closed")

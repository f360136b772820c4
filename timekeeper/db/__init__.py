"""Database module for the tracking API.

Components:
- database: engine, session factory and FastAPI session dependency
- models: SQLAlchemy ORM tables for users, profiles, folders, modules,
  entries and timer sessions
"""

from timekeeper.db.database import (
    SessionLocal,
    check_connection,
    close_db,
    create_db_engine,
    engine,
    get_db,
    init_db,
)
from timekeeper.db.models import (
    Base,
    EntryModel,
    FolderModel,
    ModuleModel,
    ProfileModel,
    TimerSessionModel,
    UserModel,
)

__all__ = [
    # Connection
    "engine",
    "create_db_engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "close_db",
    "check_connection",
    # Models
    "Base",
    "UserModel",
    "ProfileModel",
    "FolderModel",
    "ModuleModel",
    "EntryModel",
    "TimerSessionModel",
]

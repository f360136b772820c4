"""Repository layer for database access.

This module provides repository classes that abstract database operations.

Usage:
    from timekeeper.repositories import folder_repository

    folders = folder_repository.list_for_user(db, user_id)
    folder = folder_repository.get_owned(db, user_id, folder_id)
"""

from timekeeper.repositories.entry import EntryRepository, entry_repository
from timekeeper.repositories.folder import FolderRepository, folder_repository
from timekeeper.repositories.module import ModuleRepository, module_repository
from timekeeper.repositories.profile import ProfileRepository, profile_repository
from timekeeper.repositories.timer_session import TimerSessionRepository, timer_session_repository
from timekeeper.repositories.user import UserRepository, user_repository

__all__ = [
    "UserRepository",
    "user_repository",
    "ProfileRepository",
    "profile_repository",
    "FolderRepository",
    "folder_repository",
    "ModuleRepository",
    "module_repository",
    "EntryRepository",
    "entry_repository",
    "TimerSessionRepository",
    "timer_session_repository",
]

"""Folder repository for database operations."""

from sqlalchemy.orm import Session

from timekeeper.db.models import FolderModel
from timekeeper.repositories.base import BaseRepository


class FolderRepository(BaseRepository[FolderModel]):
    """Repository for Folder entity operations."""

    def __init__(self):
        super().__init__(FolderModel)

    def _default_order(self) -> tuple:
        return (FolderModel.order_index, FolderModel.created_at)

    def count_siblings(self, db: Session, user_id: str, parent_id: str | None) -> int:
        """Number of folders directly under ``parent_id`` (None = roots)."""
        if parent_id is None:
            parent_clause = FolderModel.parent_id.is_(None)
        else:
            parent_clause = FolderModel.parent_id == parent_id
        return self.count_where(db, FolderModel.user_id == user_id, parent_clause)


# Singleton instance
folder_repository = FolderRepository()

"""Module repository for database operations."""

from sqlalchemy.orm import Session

from timekeeper.db.models import ModuleModel
from timekeeper.repositories.base import BaseRepository


class ModuleRepository(BaseRepository[ModuleModel]):
    """Repository for Module entity operations."""

    def __init__(self):
        super().__init__(ModuleModel)

    def _default_order(self) -> tuple:
        return (ModuleModel.order_index, ModuleModel.created_at)

    def count_in_folder(self, db: Session, user_id: str, folder_id: str) -> int:
        return self.count_where(db, ModuleModel.user_id == user_id, ModuleModel.folder_id == folder_id)


# Singleton instance
module_repository = ModuleRepository()

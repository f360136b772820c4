"""Shared persistence helpers for user-owned tracking rows.

Every tracking table carries a ``user_id`` column. Lookups go through
``get_owned`` / ``list_for_user`` so a row owned by another user is
indistinguishable from a missing one. Each write commits immediately.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timekeeper.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Ownership-aware CRUD for one ORM model."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    # ==================== Reads ====================

    def get_by_id(self, db: Session, id: str) -> ModelType | None:
        return db.get(self.model, id)

    def get_owned(self, db: Session, user_id: str, id: str) -> ModelType | None:
        """Row ``id`` if ``user_id`` owns it, else None."""
        row = self.get_by_id(db, id)
        return row if row is not None and row.user_id == user_id else None

    def list_for_user(self, db: Session, user_id: str) -> list[ModelType]:
        """All rows of ``user_id`` in the repository's display order."""
        stmt = select(self.model).where(self.model.user_id == user_id).order_by(*self._default_order())
        return list(db.scalars(stmt))

    def count_where(self, db: Session, *criteria) -> int:
        return db.scalar(select(func.count()).select_from(self.model).where(*criteria))

    def _default_order(self) -> tuple:
        return (self.model.created_at,)

    # ==================== Writes ====================

    def _save(self, db: Session, row: ModelType) -> ModelType:
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    def create(self, db: Session, values: dict[str, Any]) -> ModelType:
        """Insert a row built from column ``values``."""
        return self._save(db, self.model(**values))

    def update(self, db: Session, row: ModelType, values: dict[str, Any]) -> ModelType:
        """Write the given columns; keys that are not mapped attributes are ignored.

        An explicit ``None`` value is written as NULL.
        """
        for column, value in values.items():
            if hasattr(row, column):
                setattr(row, column, value)
        return self._save(db, row)

    def delete_obj(self, db: Session, row: ModelType) -> None:
        """Delete a loaded row; ORM cascades remove its dependents."""
        db.delete(row)
        db.commit()

    def delete(self, db: Session, id: str) -> bool:
        """Delete by primary key. Returns False if the row does not exist."""
        row = self.get_by_id(db, id)
        if row is None:
            return False
        self.delete_obj(db, row)
        return True

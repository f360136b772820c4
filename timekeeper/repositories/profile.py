"""Profile repository for database operations."""

from typing import Any

from sqlalchemy.orm import Session

from timekeeper.db.models import ProfileModel
from timekeeper.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[ProfileModel]):
    """Repository for user profiles, keyed by user_id."""

    def __init__(self):
        super().__init__(ProfileModel)

    def get_for_user(self, db: Session, user_id: str) -> ProfileModel | None:
        return db.get(ProfileModel, user_id)

    def upsert(self, db: Session, user_id: str, obj_in: dict[str, Any]) -> ProfileModel:
        """Insert the profile row or update the given fields of the existing one.

        Args:
            db: Database session
            user_id: Owning user (primary key)
            obj_in: Column values to write; None values are skipped

        Returns:
            Stored profile
        """
        values = {key: value for key, value in obj_in.items() if value is not None}
        profile = self.get_for_user(db, user_id)
        if profile is None:
            return self.create(db, {"user_id": user_id, **values})
        return self.update(db, profile, values)


# Singleton instance
profile_repository = ProfileRepository()

"""Accounts of the tracking API. Emails are stored lower-cased."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from timekeeper.db.models import UserModel
from timekeeper.repositories.base import BaseRepository
from timekeeper.utils import generate_id


class UserRepository(BaseRepository[UserModel]):
    """Repository for user accounts."""

    def __init__(self):
        super().__init__(UserModel)

    def get_by_email(self, db: Session, email: str) -> UserModel | None:
        return db.scalars(select(UserModel).where(UserModel.email == email.lower())).one_or_none()

    def create_user(
        self,
        db: Session,
        email: str,
        hashed_password: str,
        display_name: str | None = None,
    ) -> UserModel:
        """Insert an account; the caller checks for a duplicate email first."""
        return self.create(
            db,
            {
                "id": generate_id("user"),
                "email": email.lower(),
                "display_name": display_name,
                "hashed_password": hashed_password,
            },
        )


# Singleton instance
user_repository = UserRepository()

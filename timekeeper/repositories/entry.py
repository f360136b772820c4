"""Entry repository for database operations."""

from timekeeper.db.models import EntryModel
from timekeeper.repositories.base import BaseRepository


class EntryRepository(BaseRepository[EntryModel]):
    """Repository for time entries. Newest entry dates come first."""

    def __init__(self):
        super().__init__(EntryModel)

    def _default_order(self) -> tuple:
        return (EntryModel.entry_date.desc(), EntryModel.created_at.desc())


# Singleton instance
entry_repository = EntryRepository()

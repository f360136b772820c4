"""Timer session repository for database operations."""

from timekeeper.db.models import TimerSessionModel
from timekeeper.repositories.base import BaseRepository


class TimerSessionRepository(BaseRepository[TimerSessionModel]):
    """Repository for recorded timer sessions."""

    def __init__(self):
        super().__init__(TimerSessionModel)

    def _default_order(self) -> tuple:
        return (TimerSessionModel.started_at.desc(),)


# Singleton instance
timer_session_repository = TimerSessionRepository()

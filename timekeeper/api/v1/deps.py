"""Shared FastAPI dependencies for the /zeit routes."""

from fastapi import Depends
from sqlalchemy.orm import Session

from timekeeper.api.v1.endpoints.auth import get_current_user
from timekeeper.db.database import get_db
from timekeeper.db.models import UserModel
from timekeeper.services.tracking_service import TrackingService


def get_tracking_service(
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TrackingService:
    """TrackingService bound to the authenticated user."""
    return TrackingService(db, current_user.id)

from .store import TimeTrackingStore
from .tracking_service import TrackingService

__all__ = [
    "TimeTrackingStore",
    "TrackingService",
]

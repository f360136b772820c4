from .duration import hours_to_minutes, minutes_to_hours
from .id_generator import generate_id
from .logging import get_logger, setup_logging
from .time_utils import parse_entry_date, to_iso, utc_now

__all__ = [
    "generate_id",
    "get_logger",
    "setup_logging",
    "hours_to_minutes",
    "minutes_to_hours",
    "parse_entry_date",
    "to_iso",
    "utc_now",
]

"""Prefixed, roughly time-sortable identifiers for tracking rows."""

import random
import string
import time

ID_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_LENGTH = 6

# Row kinds created by the tracking API
ENTITY_PREFIXES = frozenset({"user", "folder", "module", "entry", "timer"})


def _base36(num: int) -> str:
    digits = []
    while True:
        num, rem = divmod(num, 36)
        digits.append(ID_ALPHABET[rem])
        if num == 0:
            return "".join(reversed(digits))


def generate_id(prefix: str) -> str:
    """Build "{prefix}_{ms_base36}{random}", e.g. entry_lt2k9x0a7f3q1c.

    Raises:
        ValueError: If ``prefix`` is not a known entity kind
    """
    if prefix not in ENTITY_PREFIXES:
        raise ValueError(f"Unknown id prefix: {prefix!r}")
    suffix = "".join(random.choices(ID_ALPHABET, k=RANDOM_LENGTH))
    return f"{prefix}_{_base36(time.time_ns() // 1_000_000)}{suffix}"

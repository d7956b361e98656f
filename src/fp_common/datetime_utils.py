"""UTC datetime utilities."""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def unix_now() -> float:
    """Seconds since the epoch, the unit ledger timestamps use."""
    return time.time()

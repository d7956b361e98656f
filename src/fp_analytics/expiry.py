"""Countdown formatting for ponder end times (unix seconds)."""

ENDED = "Ended"
ENDING_SOON_SECONDS = 3600


def time_to_expiry(end_time: float, now: float) -> str:
    """'2d 3h' above 24 hours, '5h 12m' above one hour, '42m' below, 'Ended' once past.

    Units are floored, so the displayed duration never overstates what is left.
    """
    remaining = end_time - now
    if remaining <= 0:
        return ENDED

    hours = int(remaining // 3600)
    minutes = int((remaining % 3600) // 60)
    if hours > 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def is_ending_soon(end_time: float, now: float) -> bool:
    remaining = end_time - now
    return 0 <= remaining < ENDING_SOON_SECONDS

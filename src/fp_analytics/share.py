"""Vote-share arithmetic over ledger-reported vote counts."""

from src.fp_market.domain.models import Ponder


def option_share_percent(ponder: Ponder, option_index: int) -> float:
    """Share of all votes cast for `option_index`, in percent.

    0.0 when nobody has voted yet. Raises IndexError for an unknown option.
    """
    if not 0 <= option_index < len(ponder.vote_counts):
        raise IndexError(f"option {option_index} out of range for ponder {ponder.id}")
    total = sum(ponder.vote_counts)
    if total == 0:
        return 0.0
    return ponder.vote_counts[option_index] / total * 100


def option_shares(ponder: Ponder) -> list[float]:
    return [option_share_percent(ponder, i) for i in range(len(ponder.vote_counts))]


def leading_option(ponder: Ponder) -> int | None:
    """Index with the most votes (lowest index on ties), None before any vote."""
    if not ponder.vote_counts or sum(ponder.vote_counts) == 0:
        return None
    return max(range(len(ponder.vote_counts)), key=lambda i: (ponder.vote_counts[i], -i))

"""Ponder list filtering and per-user vote lookups."""

from src.fp_analytics.expiry import is_ending_soon
from src.fp_common.enums import PonderFilter
from src.fp_market.domain.models import Ponder, Vote


def matches_search(ponder: Ponder, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in ponder.question.lower() or needle in ponder.category.lower()


def filter_ponders(
    ponders: list[Ponder],
    now: float,
    query: str | None = None,
    mode: PonderFilter | str = PonderFilter.ALL,
) -> list[Ponder]:
    """Search over question/category, then keep featured (juiced) or ending-soon ponders."""
    selected = PonderFilter(mode)
    result = []
    for ponder in ponders:
        if query and not matches_search(ponder, query):
            continue
        if selected == PonderFilter.FEATURED and not ponder.is_juiced:
            continue
        if selected == PonderFilter.ENDING_SOON and not is_ending_soon(ponder.end_time, now):
            continue
        result.append(ponder)
    return result


def votes_for_ponder(votes: list[Vote], ponder_id: int) -> list[Vote]:
    return [v for v in votes if v.ponder_id == ponder_id]


def vote_for_option(votes: list[Vote], option_index: int) -> Vote | None:
    return next((v for v in votes if v.option == option_index), None)

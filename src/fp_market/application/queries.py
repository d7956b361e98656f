"""MarketReadService — read-only composition over the ponder repository.

Nothing here mutates ledger or session state; every method is safe to retry.
"""

import asyncio
import logging
from collections.abc import Callable

from src.fp_analytics.filters import filter_ponders, votes_for_ponder
from src.fp_analytics.leaderboard import parse_metric, rank_leaderboard
from src.fp_common.datetime_utils import unix_now
from src.fp_common.enums import LeaderboardMetric, PonderFilter
from src.fp_common.errors import AppError, PonderNotFoundError
from src.fp_market.domain.models import LeaderboardEntry, Ponder, UserStats, Vote
from src.fp_market.domain.repository import PonderRepositoryProtocol

logger = logging.getLogger(__name__)


class MarketReadService:
    def __init__(
        self,
        repo: PonderRepositoryProtocol,
        clock: Callable[[], float] = unix_now,
    ) -> None:
        self._repo = repo
        self._clock = clock

    async def list_ponders(
        self,
        query: str | None = None,
        mode: PonderFilter | str = PonderFilter.ALL,
    ) -> list[Ponder]:
        ponders = await self._repo.list_active_ponders()
        return filter_ponders(ponders, now=self._clock(), query=query, mode=mode)

    async def get_ponder(self, ponder_id: int) -> Ponder:
        ponder = await self._repo.get_ponder(ponder_id)
        if ponder is None:
            raise PonderNotFoundError(ponder_id)
        return ponder

    async def get_user_stats(self, address: str) -> UserStats | None:
        return await self._repo.get_user_stats(address)

    async def get_user_votes(self, address: str, ponder_id: int | None = None) -> list[Vote]:
        votes = await self._repo.get_user_votes(address)
        return votes if ponder_id is None else votes_for_ponder(votes, ponder_id)

    async def load_leaderboard(
        self, metric: str | LeaderboardMetric = LeaderboardMetric.ACCURACY
    ) -> list[LeaderboardEntry]:
        """Zip leaderboard addresses with their stats, then rank.

        Stats are fetched concurrently; a failed lookup counts as a missing
        snapshot and the entry drops out of the ranking.
        """
        chosen = parse_metric(metric)
        addresses = await self._repo.get_leaderboard_addresses()
        results = await asyncio.gather(
            *(self._repo.get_user_stats(a) for a in addresses), return_exceptions=True
        )
        entries = []
        for address, result in zip(addresses, results):
            if isinstance(result, AppError):
                logger.warning("Stats lookup for %s failed: %s", address, result.message)
                result = None
            elif isinstance(result, BaseException):
                raise result
            entries.append(LeaderboardEntry(address=address, stats=result))
        return rank_leaderboard(entries, chosen)

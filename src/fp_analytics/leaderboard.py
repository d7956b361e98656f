"""Leaderboard ranking by a selectable metric."""

from decimal import Decimal

from src.fp_common.enums import LeaderboardMetric
from src.fp_market.domain.models import LeaderboardEntry, UserStats

# Short names accepted alongside the enum values
_ALIASES: dict[str, LeaderboardMetric] = {
    "winnings": LeaderboardMetric.TOTAL_WINNINGS,
    "votes": LeaderboardMetric.TOTAL_VOTES,
}


def parse_metric(metric: str | LeaderboardMetric) -> LeaderboardMetric:
    if isinstance(metric, LeaderboardMetric):
        return metric
    if metric in _ALIASES:
        return _ALIASES[metric]
    try:
        return LeaderboardMetric(metric)
    except ValueError:
        raise ValueError(
            f"Unknown leaderboard metric {metric!r}; "
            f"expected one of {[m.value for m in LeaderboardMetric]}"
        ) from None


def metric_value(stats: UserStats, metric: LeaderboardMetric) -> float | Decimal | int:
    if metric == LeaderboardMetric.ACCURACY:
        return stats.accuracy
    if metric == LeaderboardMetric.TOTAL_WINNINGS:
        return stats.total_winnings
    return stats.total_votes


def rank_leaderboard(
    entries: list[LeaderboardEntry], metric: str | LeaderboardMetric
) -> list[LeaderboardEntry]:
    """Descending by metric; entries without stats are dropped, ties keep input order."""
    chosen = parse_metric(metric)
    ranked = [e for e in entries if e.stats is not None]
    return sorted(
        ranked, key=lambda e: metric_value(e.stats, chosen), reverse=True  # type: ignore[arg-type]
    )

"""Pydantic schemas for the HTTP facade — plain snapshots for rendering.

Amounts travel as strings so no precision is lost on the way to a client;
derived analytics (shares, countdown, palette) are computed here from the
last ledger-confirmed snapshot.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.fp_analytics.expiry import is_ending_soon, time_to_expiry
from src.fp_analytics.formatting import format_accuracy, format_address
from src.fp_analytics.palette import color_for_option
from src.fp_analytics.share import leading_option, option_share_percent
from src.fp_common.ufix import format_amount
from src.fp_market.domain.models import (
    CreatePonderReceipt,
    LeaderboardEntry,
    PendingOperation,
    Ponder,
    UserStats,
    Vote,
    VoteReceipt,
    WithdrawReceipt,
)

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreatePonderRequest(BaseModel):
    question: str
    description: str = ""
    options: list[str]
    duration_hours: Decimal = Decimal(24)
    min_bet: Decimal = Decimal("0.50")
    max_bet: Decimal = Decimal("100.00")
    category: str


class PlaceVoteRequest(BaseModel):
    option_index: int = Field(ge=0)
    amount: Decimal | None = None  # None = free vote


# ---------------------------------------------------------------------------
# Ponders
# ---------------------------------------------------------------------------


class OptionOut(BaseModel):
    index: int
    label: str
    votes: int
    share_percent: float
    color: str


class PendingOut(BaseModel):
    kind: str
    phase: str
    transaction_id: str | None
    started_at: str

    @classmethod
    def from_domain(cls, op: PendingOperation) -> "PendingOut":
        return cls(
            kind=op.kind.value,
            phase=op.phase.value,
            transaction_id=op.transaction_id,
            started_at=op.started_at.isoformat(),
        )


class PonderOut(BaseModel):
    id: int
    question: str
    description: str
    category: str
    options: list[OptionOut]
    created_at: int
    end_time: int
    time_left: str
    ending_soon: bool
    min_bet: str
    max_bet: str
    total_votes: int
    leading_option: int | None
    total_pool: str
    total_pool_display: str
    juice_amount: str
    is_juiced: bool
    is_resolved: bool
    winning_option: int | None
    pending: PendingOut | None = None

    @classmethod
    def from_domain(
        cls, p: Ponder, now: float, pending: PendingOperation | None = None
    ) -> "PonderOut":
        return cls(
            id=p.id,
            question=p.question,
            description=p.description,
            category=p.category,
            options=[
                OptionOut(
                    index=i,
                    label=label,
                    votes=p.vote_counts[i],
                    share_percent=option_share_percent(p, i),
                    color=color_for_option(i),
                )
                for i, label in enumerate(p.options)
            ],
            created_at=p.created_at,
            end_time=p.end_time,
            time_left=time_to_expiry(p.end_time, now),
            ending_soon=is_ending_soon(p.end_time, now),
            min_bet=str(p.min_bet),
            max_bet=str(p.max_bet),
            total_votes=p.total_votes,
            leading_option=leading_option(p),
            total_pool=str(p.total_pool),
            total_pool_display=format_amount(p.total_pool),
            juice_amount=str(p.juice_amount),
            is_juiced=p.is_juiced,
            is_resolved=p.is_resolved,
            winning_option=p.winning_option,
            pending=PendingOut.from_domain(pending) if pending else None,
        )


class VoteOut(BaseModel):
    ponder_id: int
    option: int
    is_free_vote: bool
    amount: str
    timestamp: int
    voter: str

    @classmethod
    def from_domain(cls, v: Vote) -> "VoteOut":
        return cls(
            ponder_id=v.ponder_id,
            option=v.option,
            is_free_vote=v.is_free_vote,
            amount=str(v.amount),
            timestamp=v.timestamp,
            voter=v.voter,
        )


# ---------------------------------------------------------------------------
# Stats / leaderboard
# ---------------------------------------------------------------------------


class UserStatsOut(BaseModel):
    accuracy: float
    accuracy_display: str
    total_winnings: str
    total_winnings_display: str
    total_votes: int
    total_staked: str
    correct_predictions: int

    @classmethod
    def from_domain(cls, s: UserStats) -> "UserStatsOut":
        return cls(
            accuracy=s.accuracy,
            accuracy_display=format_accuracy(s.accuracy),
            total_winnings=str(s.total_winnings),
            total_winnings_display=format_amount(s.total_winnings),
            total_votes=s.total_votes,
            total_staked=str(s.total_staked),
            correct_predictions=s.correct_predictions,
        )


class LeaderboardEntryOut(BaseModel):
    rank: int
    address: str
    address_display: str
    stats: UserStatsOut

    @classmethod
    def from_ranked(cls, entries: list[LeaderboardEntry]) -> list["LeaderboardEntryOut"]:
        return [
            cls(
                rank=i + 1,
                address=e.address,
                address_display=format_address(e.address),
                stats=UserStatsOut.from_domain(e.stats),  # type: ignore[arg-type]
            )
            for i, e in enumerate(entries)
        ]


# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------


class CreatePonderOut(BaseModel):
    ponder_id: int
    transaction_id: str

    @classmethod
    def from_receipt(cls, r: CreatePonderReceipt) -> "CreatePonderOut":
        return cls(ponder_id=r.ponder_id, transaction_id=r.transaction_id)


class VoteReceiptOut(BaseModel):
    transaction_id: str
    ponder_id: int
    option: int
    is_free_vote: bool
    amount: str
    balance: str | None
    ponder: PonderOut | None

    @classmethod
    def from_receipt(cls, r: VoteReceipt, now: float) -> "VoteReceiptOut":
        return cls(
            transaction_id=r.transaction_id,
            ponder_id=r.ponder_id,
            option=r.option,
            is_free_vote=r.is_free_vote,
            amount=str(r.amount),
            balance=None if r.balance is None else str(r.balance),
            ponder=PonderOut.from_domain(r.ponder, now) if r.ponder else None,
        )


class WithdrawReceiptOut(BaseModel):
    transaction_id: str
    ponder_id: int
    balance: str | None

    @classmethod
    def from_receipt(cls, r: WithdrawReceipt) -> "WithdrawReceiptOut":
        return cls(
            transaction_id=r.transaction_id,
            ponder_id=r.ponder_id,
            balance=None if r.balance is None else str(r.balance),
        )

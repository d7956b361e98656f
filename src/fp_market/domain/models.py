"""Domain models for fp_market — pure dataclasses, no business logic.

Everything except PendingOperation mirrors state the ledger owns; the client
only ever holds read-only snapshots of it.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.fp_common.enums import OperationKind, OperationPhase


@dataclass
class Ponder:
    id: int
    question: str
    description: str
    options: list[str]
    category: str
    created_at: int          # unix seconds
    end_time: int            # unix seconds
    min_bet: Decimal
    max_bet: Decimal
    vote_counts: list[int]   # aligned 1:1 with options
    total_pool: Decimal
    juice_amount: Decimal = Decimal("0")
    is_juiced: bool = False
    creator: str | None = None
    is_resolved: bool = False
    winning_option: int | None = None

    @property
    def total_votes(self) -> int:
        return sum(self.vote_counts)

    def has_ended(self, now: float) -> bool:
        return now >= self.end_time


@dataclass
class Vote:
    ponder_id: int
    option: int
    is_free_vote: bool
    amount: Decimal
    timestamp: int
    voter: str


@dataclass
class UserStats:
    accuracy: float          # [0, 1]
    total_winnings: Decimal
    total_votes: int
    total_staked: Decimal
    correct_predictions: int


@dataclass
class LeaderboardEntry:
    address: str
    stats: UserStats | None  # None when the ledger had no snapshot for the address


@dataclass
class PonderDraft:
    """Validated create-ponder input, ready to be encoded."""

    question: str
    description: str
    options: list[str]
    duration_hours: Decimal
    min_bet: Decimal
    max_bet: Decimal
    category: str


@dataclass
class PendingOperation:
    kind: OperationKind
    address: str
    ponder_id: int | None
    started_at: datetime
    phase: OperationPhase = OperationPhase.PROPOSED
    transaction_id: str | None = None


@dataclass
class CreatePonderReceipt:
    ponder_id: int
    transaction_id: str


@dataclass
class VoteReceipt:
    transaction_id: str
    ponder_id: int
    option: int
    is_free_vote: bool
    amount: Decimal
    ponder: Ponder | None = None      # re-queried snapshot, None if that read failed
    balance: Decimal | None = None    # refreshed balance, None if that read failed


@dataclass
class WithdrawReceipt:
    transaction_id: str
    ponder_id: int
    balance: Decimal | None = None

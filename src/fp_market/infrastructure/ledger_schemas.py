"""Pydantic schemas for decoded ledger payloads.

Scripts return loosely-typed JSON-Cadence structs (camelCase field names,
UFix64 timestamps). These models pin the shape down at the boundary and
convert to the fp_market domain dataclasses, so nothing downstream handles
raw ledger data.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.fp_market.domain.models import Ponder, UserStats, Vote


def _whole_seconds(value: Any) -> Any:
    """UFix64 block timestamps ('1700000000.00000000') -> int seconds."""
    if isinstance(value, (Decimal, float, str)):
        try:
            return int(Decimal(str(value)))
        except (ArithmeticError, ValueError) as exc:
            raise ValueError(f"not a timestamp: {value!r}") from exc
    return value


class _LedgerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PonderRecord(_LedgerModel):
    id: int = Field(ge=0)
    question: str
    description: str = ""
    options: list[str]
    category: str
    created_at: int = Field(alias="createdAt")
    end_time: int = Field(alias="endTime")
    min_bet: Decimal = Field(alias="minBet", ge=0)
    max_bet: Decimal = Field(alias="maxBet", ge=0)
    vote_counts: list[int] = Field(alias="voteCounts")
    total_pool: Decimal = Field(alias="totalPool", ge=0)
    juice_amount: Decimal = Field(default=Decimal("0"), alias="juiceAmount", ge=0)
    is_juiced: bool = Field(default=False, alias="isJuiced")
    creator: str | None = None
    is_resolved: bool = Field(default=False, alias="isResolved")
    winning_option: int | None = Field(default=None, alias="winningOption")

    @field_validator("created_at", "end_time", mode="before")
    @classmethod
    def coerce_seconds(cls, v: Any) -> Any:
        return _whole_seconds(v)

    @field_validator("vote_counts")
    @classmethod
    def non_negative_counts(cls, v: list[int]) -> list[int]:
        if any(c < 0 for c in v):
            raise ValueError("vote counts must be non-negative")
        return v

    @model_validator(mode="after")
    def counts_align_with_options(self) -> "PonderRecord":
        if len(self.vote_counts) != len(self.options):
            raise ValueError(
                f"voteCounts has {len(self.vote_counts)} entries for {len(self.options)} options"
            )
        return self

    def to_domain(self) -> Ponder:
        return Ponder(
            id=self.id,
            question=self.question,
            description=self.description,
            options=list(self.options),
            category=self.category,
            created_at=self.created_at,
            end_time=self.end_time,
            min_bet=self.min_bet,
            max_bet=self.max_bet,
            vote_counts=list(self.vote_counts),
            total_pool=self.total_pool,
            juice_amount=self.juice_amount,
            is_juiced=self.is_juiced,
            creator=self.creator,
            is_resolved=self.is_resolved,
            winning_option=self.winning_option,
        )


class VoteRecord(_LedgerModel):
    ponder_id: int = Field(alias="ponderId", ge=0)
    option: int = Field(ge=0)
    is_free_vote: bool = Field(alias="isFreeVote")
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    timestamp: int
    voter: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_seconds(cls, v: Any) -> Any:
        return _whole_seconds(v)

    def to_domain(self) -> Vote:
        return Vote(
            ponder_id=self.ponder_id,
            option=self.option,
            is_free_vote=self.is_free_vote,
            amount=Decimal("0") if self.is_free_vote else self.amount,
            timestamp=self.timestamp,
            voter=self.voter,
        )


class UserStatsRecord(_LedgerModel):
    accuracy: float = Field(ge=0, le=1)
    total_winnings: Decimal = Field(alias="totalWinnings", ge=0)
    total_votes: int = Field(alias="totalVotes", ge=0)
    total_staked: Decimal = Field(default=Decimal("0"), alias="totalStaked", ge=0)
    correct_predictions: int = Field(default=0, alias="correctPredictions", ge=0)

    def to_domain(self) -> UserStats:
        return UserStats(
            accuracy=self.accuracy,
            total_winnings=self.total_winnings,
            total_votes=self.total_votes,
            total_staked=self.total_staked,
            correct_predictions=self.correct_predictions,
        )

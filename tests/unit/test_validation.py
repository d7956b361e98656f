"""Tests for fp_market.domain.validation — pure functions, no network."""

from decimal import Decimal

import pytest

from src.fp_common.errors import PonderEndedError, PonderNotResolvedError, ValidationError
from src.fp_market.domain.models import Ponder
from src.fp_market.domain.validation import (
    clean_options,
    parse_amount,
    validate_create_ponder,
    validate_vote,
    validate_withdrawal,
)

NOW = 1_700_000_000


def _make_ponder(**overrides: object) -> Ponder:
    fields: dict[str, object] = dict(
        id=1,
        question="Will it rain in Lisbon tomorrow?",
        description="",
        options=["Yes", "No"],
        category="Science",
        created_at=NOW - 3600,
        end_time=NOW + 86400,
        min_bet=Decimal("0.5"),
        max_bet=Decimal("100"),
        vote_counts=[0, 0],
        total_pool=Decimal("0"),
    )
    fields.update(overrides)
    return Ponder(**fields)  # type: ignore[arg-type]


def _create(**overrides: object):
    kwargs: dict[str, object] = dict(
        question="Will BTC close above 100k this year?",
        description="Resolves on Dec 31 UTC close",
        options=["Yes", "No"],
        duration_hours=24,
        min_bet="0.50",
        max_bet="100",
        category="Crypto",
        balance=Decimal("10"),
    )
    kwargs.update(overrides)
    return validate_create_ponder(**kwargs)  # type: ignore[arg-type]


def _field_of(exc_info: pytest.ExceptionInfo[ValidationError]) -> str:
    return exc_info.value.field


class TestCreatePonder:
    def test_valid_draft(self) -> None:
        draft = _create(options=["Yes", "  ", "No "])
        assert draft.options == ["Yes", "No"]
        assert draft.min_bet == Decimal("0.50")
        assert draft.duration_hours == Decimal(24)

    def test_question_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(question="   ")
        assert _field_of(exc_info) == "question"

    def test_question_too_short(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(question="Rain?")
        assert _field_of(exc_info) == "question"

    def test_question_too_long(self) -> None:
        with pytest.raises(ValidationError):
            _create(question="x" * 501)

    def test_description_too_long(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(description="d" * 1001)
        assert _field_of(exc_info) == "description"

    def test_needs_two_options(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(options=["Yes", ""])
        assert _field_of(exc_info) == "options"

    def test_at_most_ten_options(self) -> None:
        with pytest.raises(ValidationError):
            _create(options=[f"opt {i}" for i in range(11)])

    def test_unknown_category(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(category="Weather")
        assert _field_of(exc_info) == "category"

    def test_duration_bounds(self) -> None:
        for hours in (0, -1, 721):
            with pytest.raises(ValidationError) as exc_info:
                _create(duration_hours=hours)
            assert _field_of(exc_info) == "duration_hours"
        assert _create(duration_hours=720).duration_hours == Decimal(720)

    def test_min_bet_floor(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(min_bet="0.05")
        assert _field_of(exc_info) == "min_bet"
        assert _create(min_bet="0.10").min_bet == Decimal("0.10")

    def test_max_below_min(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(min_bet="5", max_bet="1")
        assert _field_of(exc_info) == "max_bet"

    def test_min_equals_max_is_allowed(self) -> None:
        assert _create(min_bet="5", max_bet="5").max_bet == Decimal("5")

    def test_balance_must_cover_fee(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(balance=Decimal("0.99"))
        assert _field_of(exc_info) == "balance"

    def test_non_numeric_amount(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _create(max_bet="lots")
        assert _field_of(exc_info) == "max_bet"


class TestVote:
    def test_free_vote_ok(self) -> None:
        validate_vote(_make_ponder(), 1, None, Decimal("0"), NOW)

    def test_stake_within_bounds(self) -> None:
        validate_vote(_make_ponder(), 0, Decimal("0.5"), Decimal("10"), NOW)
        validate_vote(_make_ponder(), 0, Decimal("100"), Decimal("100"), NOW)

    def test_stake_below_min(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_vote(_make_ponder(), 0, Decimal("0.49"), Decimal("10"), NOW)
        assert _field_of(exc_info) == "amount"

    def test_stake_above_max(self) -> None:
        with pytest.raises(ValidationError):
            validate_vote(_make_ponder(), 0, Decimal("100.01"), Decimal("1000"), NOW)

    def test_stake_above_balance(self) -> None:
        with pytest.raises(ValidationError, match="insufficient"):
            validate_vote(_make_ponder(), 0, Decimal("5"), Decimal("4.99"), NOW)

    def test_option_out_of_range(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_vote(_make_ponder(), 2, None, Decimal("0"), NOW)
        assert _field_of(exc_info) == "option_index"
        with pytest.raises(ValidationError):
            validate_vote(_make_ponder(), -1, None, Decimal("0"), NOW)

    def test_ended_at_exact_end_time(self) -> None:
        ponder = _make_ponder(end_time=NOW)
        with pytest.raises(PonderEndedError):
            validate_vote(ponder, 0, None, Decimal("0"), NOW)

    def test_resolved(self) -> None:
        with pytest.raises(PonderEndedError):
            validate_vote(_make_ponder(is_resolved=True), 0, None, Decimal("0"), NOW)


class TestWithdrawal:
    def test_requires_resolved(self) -> None:
        with pytest.raises(PonderNotResolvedError):
            validate_withdrawal(_make_ponder())
        validate_withdrawal(_make_ponder(is_resolved=True, winning_option=0))


class TestHelpers:
    def test_clean_options(self) -> None:
        assert clean_options([" A ", "", "B", "   "]) == ["A", "B"]

    def test_parse_amount(self) -> None:
        assert parse_amount("amount", "2.0") == Decimal("2.0")
        with pytest.raises(ValidationError):
            parse_amount("amount", "NaN")
        with pytest.raises(ValidationError):
            parse_amount("amount", None)

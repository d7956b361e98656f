"""Client-side rules checked before any transaction is built.

Each check raises ValidationError naming the offending field. None of these
functions touch the network.
"""

from decimal import Decimal

from src.fp_common.enums import PonderCategory
from src.fp_common.errors import PonderEndedError, PonderNotResolvedError, ValidationError
from src.fp_common.ufix import to_decimal
from src.fp_market.domain.models import Ponder, PonderDraft

QUESTION_MIN_LENGTH = 10
QUESTION_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 1000
MIN_OPTIONS = 2
MAX_OPTIONS = 10
MAX_DURATION_HOURS = Decimal(720)
CREATION_FEE = Decimal("1.0")
MIN_BET_FLOOR = Decimal("0.10")

CATEGORIES: frozenset[str] = frozenset(c.value for c in PonderCategory)


def parse_amount(field: str, value: object) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValidationError(field, f"not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(field, f"not a number: {value!r}")
    return amount


def clean_options(options: list[str]) -> list[str]:
    """Blank options are dropped, not rejected."""
    return [o.strip() for o in options if o and o.strip()]


def validate_create_ponder(
    question: str,
    description: str,
    options: list[str],
    duration_hours: object,
    min_bet: object,
    max_bet: object,
    category: str,
    balance: Decimal,
    creation_fee: Decimal = CREATION_FEE,
    min_bet_floor: Decimal = MIN_BET_FLOOR,
) -> PonderDraft:
    question = (question or "").strip()
    if not question:
        raise ValidationError("question", "please enter a question")
    if len(question) < QUESTION_MIN_LENGTH:
        raise ValidationError(
            "question", f"must be at least {QUESTION_MIN_LENGTH} characters long"
        )
    if len(question) > QUESTION_MAX_LENGTH:
        raise ValidationError(
            "question", f"must be at most {QUESTION_MAX_LENGTH} characters long"
        )

    description = (description or "").strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description", f"must be at most {DESCRIPTION_MAX_LENGTH} characters long"
        )

    valid_options = clean_options(options)
    if len(valid_options) < MIN_OPTIONS:
        raise ValidationError("options", f"provide at least {MIN_OPTIONS} non-empty options")
    if len(valid_options) > MAX_OPTIONS:
        raise ValidationError("options", f"at most {MAX_OPTIONS} options are allowed")

    if not category:
        raise ValidationError("category", "please select a category")
    if category not in CATEGORIES:
        raise ValidationError("category", f"unknown category {category!r}")

    hours = parse_amount("duration_hours", duration_hours)
    if not Decimal(0) < hours <= MAX_DURATION_HOURS:
        raise ValidationError("duration_hours", f"must be in (0, {MAX_DURATION_HOURS}]")

    minimum = parse_amount("min_bet", min_bet)
    if minimum < min_bet_floor:
        raise ValidationError("min_bet", f"must be at least {min_bet_floor}")
    maximum = parse_amount("max_bet", max_bet)
    if maximum < minimum:
        raise ValidationError("max_bet", "must be greater than or equal to min_bet")

    if balance < creation_fee:
        raise ValidationError(
            "balance", f"need at least {creation_fee} FLOW to create a ponder, have {balance}"
        )

    return PonderDraft(
        question=question,
        description=description,
        options=valid_options,
        duration_hours=hours,
        min_bet=minimum,
        max_bet=maximum,
        category=category,
    )


def validate_vote(
    ponder: Ponder,
    option_index: int,
    amount: Decimal | None,
    balance: Decimal,
    now: float,
) -> None:
    """`amount=None` is a free vote; anything else is a stake."""
    if ponder.is_resolved or ponder.has_ended(now):
        raise PonderEndedError(ponder.id)
    if isinstance(option_index, bool) or not isinstance(option_index, int):
        raise ValidationError("option_index", f"must be an integer, got {option_index!r}")
    if not 0 <= option_index < len(ponder.options):
        raise ValidationError(
            "option_index",
            f"{option_index} is out of range for {len(ponder.options)} options",
        )
    if amount is None:
        return
    if amount < ponder.min_bet:
        raise ValidationError("amount", f"minimum bet is {ponder.min_bet}")
    if amount > ponder.max_bet:
        raise ValidationError("amount", f"maximum bet is {ponder.max_bet}")
    if amount > balance:
        raise ValidationError("amount", f"insufficient balance: {balance} available")


def validate_withdrawal(ponder: Ponder) -> None:
    if not ponder.is_resolved:
        raise PonderNotResolvedError(ponder.id)

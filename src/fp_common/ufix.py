"""Fixed-point utilities for FLOW token amounts.

The ledger stores amounts as UFix64: unsigned, 8 fraction digits.
Client code keeps amounts as Decimal and only quantizes at the wire boundary.
"""

from decimal import Decimal, InvalidOperation

UFIX64_DIGITS = 8
UFIX64_QUANTUM = Decimal(1).scaleb(-UFIX64_DIGITS)  # 0.00000001
UFIX64_MAX = (Decimal(2**64) - 1) * UFIX64_QUANTUM


def to_decimal(value: object) -> Decimal:
    """Coerce int/str/Decimal/float input to Decimal; floats go through str()."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not an amount: {value!r}") from exc


def format_ufix64(value: object) -> str:
    """Serialize an amount exactly as UFix64 expects: '2.5' -> '2.50000000'.

    Raises ValueError for negatives, non-finite values, out-of-range values
    and values carrying more than 8 fraction digits.
    """
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValueError(f"UFix64 must be finite, got {value!r}")
    if amount < 0:
        raise ValueError(f"UFix64 must be non-negative, got {value!r}")
    if amount > UFIX64_MAX:
        raise ValueError(f"UFix64 out of range: {value!r}")
    quantized = amount.quantize(UFIX64_QUANTUM)
    if quantized != amount:
        raise ValueError(f"UFix64 allows at most {UFIX64_DIGITS} fraction digits, got {value!r}")
    return f"{quantized:.{UFIX64_DIGITS}f}"


def format_amount(amount: object) -> str:
    """Display string: 12.5 -> '$12.50', 1250 -> '$1.2k'."""
    value = to_decimal(amount)
    if value >= 1000:
        return f"${value / 1000:.1f}k"
    return f"${value:.2f}"

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")
CM3_PER_M3 = Decimal(1_000_000)


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))


def d_or_zero(val) -> Decimal:
    """
    Lenient coercion for cargo figures: None, blanks, garbage and negative
    values all come back as ZERO.
    """
    if val is None or isinstance(val, bool):
        return ZERO
    if isinstance(val, str) and not val.strip():
        return ZERO
    try:
        out = d(val)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not out.is_finite() or out < ZERO:
        return ZERO
    return out


def round_2dp(amount: Decimal) -> Decimal:
    """Half-up rounding to cents (12.345 -> 12.35)."""
    return d(amount).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def is_present(val) -> bool:
    """Truthiness for intake fields; whitespace-only strings count as blank."""
    if isinstance(val, str):
        return bool(val.strip())
    return bool(val)

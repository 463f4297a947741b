from decimal import Decimal, ROUND_HALF_UP, localcontext
import math

CENT = Decimal('0.01')


def to_decimal(value) -> Decimal:
    """
    Convert a number to Decimal through its shortest repr, so 1.005 stays 1.005
    instead of the binary 1.00499999...
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value) -> float:
    """Round half away from zero to 2 decimal places."""
    amount = to_decimal(value)
    with localcontext() as ctx:
        # Keep every integer digit plus the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def is_finite_number(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except (TypeError, OverflowError):
        return False


def is_positive_number(value) -> bool:
    return is_finite_number(value) and value > 0

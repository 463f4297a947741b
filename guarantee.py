from typing import Optional

from money import is_positive_number, round2, to_decimal


def calculate_guaranteed_amount(hours_worked: Optional[float], hourly_rate: Optional[float]) -> float:
    """
    Minimum amount owed to the master for a shift: hours worked times the hourly rate.

    The guarantee only applies when both values are strictly positive finite numbers;
    anything else yields 0.
    """
    if not (is_positive_number(hours_worked) and is_positive_number(hourly_rate)):
        return 0.0
    return round2(to_decimal(hours_worked) * to_decimal(hourly_rate))


def calculate_topup_amount(guaranteed_amount: float, base_share: float) -> float:
    """Shortfall between the guarantee and the share actually earned, never negative."""
    shortfall = to_decimal(guaranteed_amount) - to_decimal(base_share)
    if shortfall <= 0:
        return 0.0
    return round2(shortfall)

from pydantic import BaseModel

from money import is_finite_number

DEFAULT_MASTER_PERCENT = 60.0
DEFAULT_SALON_PERCENT = 40.0


class SplitPercentages(BaseModel):
    master: float
    salon: float
    sum: float = 100.0


def _is_valid_percent(value) -> bool:
    return is_finite_number(value) and value >= 0


def normalize_percentages(master_pct, salon_pct) -> SplitPercentages:
    """
    Scale a master/salon percentage pair so it sums to exactly 100.

    Any pair that cannot be scaled (non-finite, negative, or summing to zero)
    falls back to the 60/40 default. Never raises for numeric input.
    """
    if not (_is_valid_percent(master_pct) and _is_valid_percent(salon_pct)):
        return SplitPercentages(master=DEFAULT_MASTER_PERCENT, salon=DEFAULT_SALON_PERCENT)

    total = master_pct + salon_pct
    if not is_finite_number(total) or total <= 0:
        return SplitPercentages(master=DEFAULT_MASTER_PERCENT, salon=DEFAULT_SALON_PERCENT)

    master = master_pct / total * 100
    # salon is the complement so the pair never drifts to 99.999... or 100.000...1
    salon = 100 - master
    return SplitPercentages(master=master, salon=salon)

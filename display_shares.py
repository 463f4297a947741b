from typing import Literal, Optional

from pydantic import BaseModel

from guarantee import calculate_topup_amount
from money import round2

SalonPolicy = Literal['forfeit', 'deduct_shortfall']


class DisplayShares(BaseModel):
    master_share: float
    salon_share: float


def _salon_deduction(salon_base: float, shortfall: float, salon_policy: SalonPolicy) -> float:
    if salon_policy == 'deduct_shortfall':
        return shortfall
    return max(salon_base, shortfall)


def calculate_display_shares(
    master_base: float,
    salon_base: float,
    guaranteed_amount: Optional[float],
    is_open_shift: bool,
    salon_policy: SalonPolicy = 'forfeit',
) -> DisplayShares:
    """
    Final master/salon amounts to show for a shift.

    Closed shifts and shifts without a guarantee keep their base shares. For an open
    shift whose guarantee exceeds the master's base share, the master is raised to the
    guarantee and the salon share absorbs the top-up, floored at zero.

    By default ('forfeit') a top-up leaves the salon nothing of the open shift, which is
    what finance screens have always shown. 'deduct_shortfall' charges the salon only
    the difference, the way shift close settles it.
    """
    if not is_open_shift or guaranteed_amount is None:
        return DisplayShares(master_share=round2(master_base), salon_share=round2(salon_base))

    # Compared in cents so a second pass over rounded output is not a new top-up
    if round2(guaranteed_amount) <= round2(master_base):
        return DisplayShares(master_share=round2(master_base), salon_share=round2(salon_base))

    shortfall = calculate_topup_amount(guaranteed_amount, master_base)
    deduction = _salon_deduction(salon_base, shortfall, salon_policy)
    return DisplayShares(
        master_share=round2(guaranteed_amount),
        salon_share=round2(max(0.0, salon_base - deduction)),
    )

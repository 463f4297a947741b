"""
Shift settlement: base shares, guarantee top-ups and the shift close use case.

Everything here works on already-loaded values. Reading shifts and staff settings
from storage, and saving the result, is up to the caller.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
import math
from typing import List, Literal, Optional

from pydantic import BaseModel

from guarantee import calculate_guaranteed_amount, calculate_topup_amount
from money import is_positive_number, round2
from percentages import normalize_percentages
from settlement_config import get_settings

logger = logging.getLogger(__name__)


class PaymentMode(str, Enum):
    PERCENT_WITH_GUARANTEE = 'percent_with_guarantee'
    PERCENT_ONLY = 'percent_only'
    # Not yet distinct; settled like PERCENT_WITH_GUARANTEE
    FIXED_PER_SHIFT = 'fixed_per_shift'
    CUSTOM = 'custom'


class BaseShares(BaseModel):
    master_share: float
    salon_share: float


class ShiftFinancials(BaseModel):
    total_amount: float
    total_consumables: float
    base_master_share: float
    base_salon_share: float
    guaranteed_amount: float
    topup_amount: float
    final_master_share: float
    final_salon_share: float
    normalized_percent_master: float
    normalized_percent_salon: float


def calculate_base_shares(total_amount: float, total_consumables: float, percent_master: float, percent_salon: float) -> BaseShares:
    """
    Split service revenue by the normalized percentages. Consumables belong
    entirely to the salon and are added on top of its share.
    """
    split = normalize_percentages(percent_master, percent_salon)
    master_share = round2(total_amount * split.master / 100)
    salon_share = round2(round2(total_amount * split.salon / 100) + total_consumables)
    return BaseShares(master_share=master_share, salon_share=salon_share)


def calculate_shift_financials(
    total_amount: float,
    total_consumables: float,
    percent_master: float,
    percent_salon: float,
    hours_worked: Optional[float],
    hourly_rate: Optional[float],
    payment_mode: PaymentMode = PaymentMode.PERCENT_WITH_GUARANTEE,
) -> ShiftFinancials:
    """
    Compute every financial figure stored for a closed shift.

    The master gets the larger of the base share and the hourly guarantee. The salon
    pays the top-up out of its own base share, never going below zero.

    Example: 10000 revenue, 500 consumables, 60/40, 8h at 1000/h gives the master
    8000 (guarantee), a top-up of 2000 and the salon 4500 - 2000 = 2500.
    """
    split = normalize_percentages(percent_master, percent_salon)
    base = calculate_base_shares(total_amount, total_consumables, percent_master, percent_salon)

    if PaymentMode(payment_mode) == PaymentMode.PERCENT_ONLY:
        guaranteed_amount = 0.0
        topup_amount = 0.0
    else:
        guaranteed_amount = calculate_guaranteed_amount(hours_worked, hourly_rate)
        topup_amount = calculate_topup_amount(guaranteed_amount, base.master_share)

    final_master_share = max(guaranteed_amount, base.master_share)
    final_salon_share = max(0.0, base.salon_share - topup_amount)

    return ShiftFinancials(
        total_amount=total_amount,
        total_consumables=total_consumables,
        base_master_share=base.master_share,
        base_salon_share=base.salon_share,
        guaranteed_amount=guaranteed_amount,
        topup_amount=topup_amount,
        final_master_share=round2(final_master_share),
        final_salon_share=round2(final_salon_share),
        normalized_percent_master=split.master,
        normalized_percent_salon=split.salon,
    )


# Shift close

ShiftStatus = Literal['open', 'closed']


class StaffShiftSnapshot(BaseModel):
    id: str
    staff_id: str
    biz_id: str
    shift_date: str
    status: ShiftStatus
    opened_at: Optional[datetime] = None


class StaffFinanceSettings(BaseModel):
    percent_master: Optional[float] = None
    percent_salon: Optional[float] = None
    hourly_rate: Optional[float] = None
    payment_mode: Optional[PaymentMode] = None


class CloseShiftItem(BaseModel):
    service_amount: Optional[float] = None
    amount: Optional[float] = None
    consumables_amount: Optional[float] = None


class CloseShiftResult(BaseModel):
    kind: Literal['no_shift', 'already_closed', 'ok']
    current_status: Optional[ShiftStatus] = None
    total_amount: float = 0.0
    total_consumables: float = 0.0
    hours_worked: Optional[float] = None
    financials: Optional[ShiftFinancials] = None


def _positive_or_zero(value) -> float:
    return value if is_positive_number(value) else 0.0


def _finite_or_zero(value) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def calculate_hours_worked(opened_at: datetime, now: datetime) -> float:
    """Hours between opening and now, rounded to 2 decimals and never negative."""
    # Naive timestamps are stored in UTC
    if opened_at.tzinfo is None and now.tzinfo is not None:
        opened_at = opened_at.replace(tzinfo=timezone.utc)
    elif now.tzinfo is None and opened_at.tzinfo is not None:
        now = now.replace(tzinfo=timezone.utc)
    seconds = (now - opened_at).total_seconds()
    return round2(max(0.0, seconds / 3600))


def close_staff_shift(
    now: datetime,
    staff: StaffFinanceSettings,
    shift: Optional[StaffShiftSnapshot],
    items: Optional[List[CloseShiftItem]] = None,
    total_amount_raw: float = 0.0,
    consumables_amount_raw: float = 0.0,
) -> CloseShiftResult:
    """
    Settle an open shift at close time.

    Totals come from the shift items when there are any, otherwise from the raw totals
    the caller sent. Hours are counted from the moment the shift opened, and only when
    the staff member has an hourly rate.
    """
    if shift is None:
        return CloseShiftResult(kind='no_shift')

    if shift.status == 'closed':
        return CloseShiftResult(kind='already_closed', current_status=shift.status)

    settings = get_settings()
    percent_master = staff.percent_master if staff.percent_master is not None else settings.default_percent_master
    percent_salon = staff.percent_salon if staff.percent_salon is not None else settings.default_percent_salon
    payment_mode = staff.payment_mode or PaymentMode(settings.default_payment_mode)
    hourly_rate = staff.hourly_rate

    items = items or []
    if items:
        total_amount = sum(
            _positive_or_zero(it.service_amount if it.service_amount is not None else it.amount)
            for it in items
        )
        total_consumables = sum(_positive_or_zero(it.consumables_amount) for it in items)
    else:
        total_amount = _finite_or_zero(total_amount_raw)
        total_consumables = _finite_or_zero(consumables_amount_raw)

    hours_worked = None
    if hourly_rate and shift.opened_at is not None:
        hours_worked = calculate_hours_worked(shift.opened_at, now)
        logger.debug(
            "Hours calculation for shift %s: opened_at=%s now=%s hours_worked=%s",
            shift.id, shift.opened_at.isoformat(), now.isoformat(), hours_worked,
        )

    financials = calculate_shift_financials(
        total_amount,
        total_consumables,
        percent_master,
        percent_salon,
        hours_worked,
        hourly_rate,
        payment_mode=payment_mode,
    )

    logger.info(
        "Closed shift %s for staff %s: master=%.2f salon=%.2f topup=%.2f",
        shift.id, shift.staff_id, financials.final_master_share,
        financials.final_salon_share, financials.topup_amount,
    )

    return CloseShiftResult(
        kind='ok',
        total_amount=total_amount,
        total_consumables=total_consumables,
        hours_worked=hours_worked,
        financials=financials,
    )

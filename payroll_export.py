"""
Payroll export: settle a table of shifts and write it out as a spreadsheet.
"""

from datetime import date
import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd

from shift import PaymentMode, ShiftFinancials, calculate_shift_financials

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['staff', 'shift_date', 'total_amount', 'percent_master', 'percent_salon']

FINANCIAL_COLUMNS = [
    'normalized_percent_master',
    'normalized_percent_salon',
    'base_master_share',
    'base_salon_share',
    'guaranteed_amount',
    'topup_amount',
    'final_master_share',
    'final_salon_share',
]


def _amount(value) -> float:
    if value is None or pd.isna(value):
        return 0.0
    return float(value)


def _optional(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _percent(value) -> float:
    # Blank cells go to the normalizer as NaN, which falls back to the default split
    if value is None or pd.isna(value):
        return math.nan
    return float(value)


def build_payroll_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Settle every shift row of `frame`.

    Expects columns staff, shift_date, total_amount, percent_master, percent_salon and
    optionally consumables, hours_worked, hourly_rate, payment_mode. Returns a copy with
    the computed financial columns appended.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    rows = []
    for record in frame.to_dict(orient='records'):
        mode = record.get('payment_mode')
        if mode is None or pd.isna(mode) or not str(mode).strip():
            mode = PaymentMode.PERCENT_WITH_GUARANTEE.value
        financials = calculate_shift_financials(
            _amount(record.get('total_amount')),
            _amount(record.get('consumables')),
            _percent(record.get('percent_master')),
            _percent(record.get('percent_salon')),
            _optional(record.get('hours_worked')),
            _optional(record.get('hourly_rate')),
            payment_mode=PaymentMode(str(mode).strip()),
        )
        rows.append(financials.model_dump(include=set(FINANCIAL_COLUMNS)))

    result = frame.reset_index(drop=True).copy()
    computed = pd.DataFrame(rows, columns=FINANCIAL_COLUMNS)
    for column in FINANCIAL_COLUMNS:
        result[column] = computed[column]

    logger.info("Settled %d shifts for payroll export", len(result))
    return result


def _money(value: Optional[float]) -> str:
    return f"{value:.2f}"


def shift_summary_rows(
    shift_date: date,
    staff_name: Optional[str],
    status: Optional[str],
    display_total_amount: float,
    total_consumables: float,
    master_share: float,
    salon_share: float,
    clients_count: int,
    financials: Optional[ShiftFinancials] = None,
    hours_worked: Optional[float] = None,
    hourly_rate: Optional[float] = None,
) -> List[Tuple[str, str]]:
    """Parameter/value rows describing a single shift."""
    status_label = {'closed': 'Closed', 'open': 'Open'}.get(status or '', 'Not started')
    guaranteed = financials.guaranteed_amount if financials else None
    topup = financials.topup_amount if financials else None

    return [
        ('Shift date', shift_date.strftime('%d.%m.%Y')),
        ('Staff', staff_name or '-'),
        ('Status', status_label),
        ('', ''),
        ('TURNOVER', ''),
        ('Total turnover', _money(display_total_amount)),
        ('Consumables', _money(total_consumables)),
        ('', ''),
        ('DISTRIBUTION', ''),
        ('Staff share', _money(master_share)),
        ('Business share', _money(salon_share)),
        ('', ''),
        ('DETAILS', ''),
        ('Clients', str(clients_count)),
        ('Hours worked', _money(hours_worked) if hours_worked else '-'),
        ('Hourly rate', f"{_money(hourly_rate)}/h" if hourly_rate else '-'),
        ('Guaranteed pay', _money(guaranteed) if guaranteed else '-'),
        ('Top-up', _money(topup) if topup else '-'),
    ]


def read_shifts(path: Union[str, Path]) -> pd.DataFrame:
    path = Path(path)
    if path.suffix.lower() in ('.xlsx', '.xlsm'):
        return pd.read_excel(path, engine='openpyxl')
    return pd.read_csv(path)


def write_payroll(frame: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write `frame` as .xlsx via openpyxl, or as CSV with a UTF-8 BOM for spreadsheet tools."""
    path = Path(path)
    if path.suffix.lower() == '.xlsx':
        frame.to_excel(path, index=False, sheet_name='Payroll', engine='openpyxl')
    else:
        frame.to_csv(path, index=False, encoding='utf-8-sig')
    logger.info("Wrote payroll export to %s", path)
    return path

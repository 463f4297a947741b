import sys
import pathlib
from datetime import datetime, timezone
import pytest

# Ensure repo root is on sys.path so tests can import the settlement modules
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from settlement_config import get_settings
from shift import (
    CloseShiftItem,
    PaymentMode,
    StaffFinanceSettings,
    StaffShiftSnapshot,
    calculate_hours_worked,
    close_staff_shift,
)

NOW = datetime(2026, 3, 2, 17, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_shift(status='open', opened_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)):
    return StaffShiftSnapshot(
        id='shift-1',
        staff_id='staff-1',
        biz_id='biz-1',
        shift_date='2026-03-02',
        status=status,
        opened_at=opened_at,
    )


def test_no_shift():
    result = close_staff_shift(NOW, StaffFinanceSettings(), None)
    assert result.kind == 'no_shift'
    assert result.financials is None


def test_already_closed():
    result = close_staff_shift(NOW, StaffFinanceSettings(), make_shift(status='closed'))
    assert result.kind == 'already_closed'
    assert result.current_status == 'closed'


def test_totals_come_from_items():
    items = [
        CloseShiftItem(service_amount=6000, consumables_amount=300),
        CloseShiftItem(amount=4000, consumables_amount=200),
        # negative amounts are ignored
        CloseShiftItem(service_amount=-100, consumables_amount=-5),
    ]
    result = close_staff_shift(
        NOW, StaffFinanceSettings(percent_master=60, percent_salon=40), make_shift(), items,
        total_amount_raw=999, consumables_amount_raw=99,
    )

    assert result.kind == 'ok'
    assert result.total_amount == 10000
    assert result.total_consumables == 500
    assert result.financials.final_master_share == 6000
    assert result.financials.final_salon_share == 4500


def test_raw_totals_used_without_items():
    result = close_staff_shift(NOW, StaffFinanceSettings(), make_shift(), [], total_amount_raw=10000, consumables_amount_raw=500)

    assert result.total_amount == 10000
    assert result.total_consumables == 500
    # default 60/40 split
    assert result.financials.base_master_share == 6000
    assert result.financials.base_salon_share == 4500


def test_hours_and_guarantee_applied_with_hourly_rate():
    staff = StaffFinanceSettings(percent_master=60, percent_salon=40, hourly_rate=1000)
    result = close_staff_shift(NOW, staff, make_shift(), [], total_amount_raw=10000, consumables_amount_raw=500)

    assert result.hours_worked == 8
    assert result.financials.guaranteed_amount == 8000
    assert result.financials.topup_amount == 2000
    assert result.financials.final_master_share == 8000
    assert result.financials.final_salon_share == 2500


def test_no_hours_without_hourly_rate():
    result = close_staff_shift(NOW, StaffFinanceSettings(), make_shift(), [], total_amount_raw=10000)
    assert result.hours_worked is None
    assert result.financials.guaranteed_amount == 0


def test_no_hours_without_opened_at():
    staff = StaffFinanceSettings(hourly_rate=1000)
    result = close_staff_shift(NOW, staff, make_shift(opened_at=None), [], total_amount_raw=10000)
    assert result.hours_worked is None


def test_staff_payment_mode_overrides_default():
    staff = StaffFinanceSettings(hourly_rate=1000, payment_mode=PaymentMode.PERCENT_ONLY)
    result = close_staff_shift(NOW, staff, make_shift(), [], total_amount_raw=10000)
    assert result.hours_worked == 8
    assert result.financials.guaranteed_amount == 0
    assert result.financials.final_master_share == 6000


def test_default_split_comes_from_settings(monkeypatch):
    monkeypatch.setenv('SETTLEMENT_DEFAULT_PERCENT_MASTER', '50')
    monkeypatch.setenv('SETTLEMENT_DEFAULT_PERCENT_SALON', '50')
    get_settings.cache_clear()

    result = close_staff_shift(NOW, StaffFinanceSettings(), make_shift(), [], total_amount_raw=10000)
    assert result.financials.base_master_share == 5000
    assert result.financials.base_salon_share == 5000


def test_hours_worked_rounding_and_floor():
    opened = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    assert calculate_hours_worked(opened, datetime(2026, 3, 2, 17, 20, tzinfo=timezone.utc)) == 8.33
    # clock skew never produces negative hours
    assert calculate_hours_worked(opened, datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)) == 0


def test_hours_worked_treats_naive_timestamps_as_utc():
    opened = datetime(2026, 3, 2, 9, 0)
    assert calculate_hours_worked(opened, NOW) == 8

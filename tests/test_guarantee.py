import sys
import pathlib
import math
import pytest

# Ensure repo root is on sys.path so tests can import the settlement modules
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from guarantee import calculate_guaranteed_amount, calculate_topup_amount
from money import round2


def test_guarantee_is_hours_times_rate():
    assert calculate_guaranteed_amount(8, 500) == 4000
    assert calculate_guaranteed_amount(8.5, 500) == 4250


@pytest.mark.parametrize('hours, rate', [
    (None, 500),
    (8, None),
    (None, None),
    (-8, 500),
    (8, -500),
    (0, 500),
    (8, 0),
    (math.nan, 500),
    (8, math.inf),
])
def test_guarantee_needs_positive_hours_and_rate(hours, rate):
    assert calculate_guaranteed_amount(hours, rate) == 0


def test_guarantee_is_rounded_to_cents():
    # 8.333 * 500.123 = 4167.524959
    assert calculate_guaranteed_amount(8.333, 500.123) == 4167.52
    # 0.1 * 3 is 0.30000000000000004 in binary floats
    assert calculate_guaranteed_amount(0.1, 3) == 0.3
    # 1.005 * 1 must round up, not down to 1.00
    assert calculate_guaranteed_amount(1.005, 1) == 1.01


def test_topup_is_the_shortfall():
    assert calculate_topup_amount(5000, 3000) == 2000
    assert calculate_topup_amount(8000, 600) == 7400


@pytest.mark.parametrize('guaranteed, base', [(3000, 5000), (4000, 4000), (0, 0), (0, 100)])
def test_topup_is_zero_when_guarantee_is_covered(guaranteed, base):
    assert calculate_topup_amount(guaranteed, base) == 0


def test_topup_with_no_base_share_is_the_full_guarantee():
    assert calculate_topup_amount(4250, 0) == 4250


def test_topup_rounds_to_cents():
    assert calculate_topup_amount(100.005, 0) == 100.01
    assert calculate_topup_amount(0.3, 0.1) == 0.2


def test_round2_rounds_half_away_from_zero():
    assert round2(2.675) == 2.68
    assert round2(1.005) == 1.01
    assert round2(-1.005) == -1.01
    assert round2(0.125) == 0.13
    assert round2(6000.123) == 6000.12
    assert round2(4000.456) == 4000.46


def test_huge_amounts_do_not_raise():
    assert calculate_topup_amount(1e30, 0) == 1e30
    assert round2(1e30) == 1e30
    assert round2(123456789012345678901234567890.125) == 123456789012345678901234567890.125
    assert calculate_guaranteed_amount(10**400, 1) == 0
    assert calculate_guaranteed_amount(1, 10**400) == 0

import argparse
import logging
import pathlib
import sys

# Ensure repo root is on sys.path so the script can import the settlement modules
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from payroll_export import build_payroll_frame, read_shifts, write_payroll
from settlement_config import get_settings


def main(argv=None):
    parser = argparse.ArgumentParser(description='Settle a spreadsheet of shifts into a payroll export.')
    parser.add_argument('source', type=pathlib.Path, help='.xlsx or .csv file with one shift per row')
    parser.add_argument('output', type=pathlib.Path, help='destination .xlsx or .csv file')
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_settings().log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if not args.source.exists():
        print(f"ERROR: file not found: {args.source}")
        return 1

    shifts = read_shifts(args.source)
    print('SHIFTS:', len(shifts))
    try:
        payroll = build_payroll_frame(shifts)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    write_payroll(payroll, args.output)
    totals = payroll[['final_master_share', 'final_salon_share', 'topup_amount']].sum()
    print(totals.round(2).to_string())
    return 0


if __name__ == '__main__':
    sys.exit(main())

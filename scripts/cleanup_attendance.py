"""Delete a class's attendance records for specific dates.

Usage:
    python scripts/cleanup_attendance.py --class-name "3rd Year IT-A" --dates 2025-09-02,2025-09-03
    python scripts/cleanup_attendance.py --class-id 1 --dates 2025-09-02
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.dept_attendance.dept_attendance.common.datetime_utils import parse_iso_date
from src.dept_attendance.dept_attendance.container import build_container
from src.dept_attendance.dept_attendance.core.exceptions import DomainError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--class-id", help="Class id")
    target.add_argument("--class-name", help="Exact class name, e.g. '3rd Year IT-A'")
    parser.add_argument("--dates", required=True, help="Comma-separated YYYY-MM-DD dates")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))

    try:
        dates = [parse_iso_date(s.strip()) for s in args.dates.split(",") if s.strip()]
        class_info, removed = container.attendance_service.purge_class_dates(
            class_ref=args.class_id or args.class_name,
            dates=dates,
        )
    except DomainError as e:
        print(f"Cleanup failed: {e}", file=sys.stderr)
        return 2

    print(
        f"Deleted {removed} attendance record(s) for {class_info.class_name} "
        f"on: {', '.join(d.isoformat() for d in dates)}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

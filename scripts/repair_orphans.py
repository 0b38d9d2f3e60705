"""Delete classes, students and marks whose parent record is gone.

Usage:
    python scripts/repair_orphans.py            # dry run
    python scripts/repair_orphans.py --apply
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.connection import DBConfig, DatabaseConnection
from src.attendance_tracker.attendance_tracker.main import configure_logging
from src.attendance_tracker.attendance_tracker.maintenance.orphan_repair import OrphanRepairJob


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--apply", action="store_true", help="delete the orphans (default: dry run)")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    job = OrphanRepairJob(DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG))))
    report = job.run(dry_run=not args.apply)

    print(
        f"{'DRY RUN' if report.dry_run else 'APPLIED'}: "
        f"classes={len(report.classes)} students={len(report.students)} marks={len(report.marks)}"
    )
    if report.dry_run and report.total:
        print("Re-run with --apply to delete them.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Re-key legacy teacher ids to identity-provider ids.

Usage:
    python scripts/remap_teacher_ids.py --mapping ids.csv            # dry run
    python scripts/remap_teacher_ids.py --mapping ids.csv --apply

The CSV holds ``legacy_id,provider_id`` rows; a header row is optional.
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
from src.attendance_tracker.attendance_tracker.maintenance.teacher_id_remap import TeacherIdRemapJob, load_mapping


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--mapping", required=True, help="CSV file with legacy_id,provider_id rows")
    parser.add_argument("--apply", action="store_true", help="commit the changes (default: dry run)")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    mapping = load_mapping(args.mapping)
    job = TeacherIdRemapJob(DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG))))
    report = job.run(mapping, dry_run=not args.apply)

    for step in report.steps:
        print(f"{step.action.value:<15} {step.legacy_id} -> {step.provider_id}")
    print(
        f"{'DRY RUN' if report.dry_run else 'APPLIED'}: "
        f"teachers={report.teachers_rekeyed} classes={report.classes_updated} "
        f"marks={report.marks_updated} skipped={len(report.skipped)}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

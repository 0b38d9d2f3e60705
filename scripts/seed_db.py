"""Load the demo classes and students, then give the demo teachers a usable password.

Usage:
    python scripts/seed_db.py
    python scripts/seed_db.py --demo-password 'another-secret'
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

from src.attendance_tracker.attendance_tracker.core.constants import MIN_PASSWORD_LENGTH
from src.attendance_tracker.attendance_tracker.database.bootstrap import (
    DEMO_TEACHER_EMAILS,
    apply_seed_sql,
    describe_target,
    ensure_demo_teachers,
)
from src.attendance_tracker.attendance_tracker.main import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", help="settings environment (default: APP_ENV)")
    parser.add_argument("--demo-password", default="password123", help="password set on the demo teachers")
    args = parser.parse_args(argv)

    if len(args.demo_password) < MIN_PASSWORD_LENGTH:
        parser.error(f"--demo-password must be at least {MIN_PASSWORD_LENGTH} characters")

    settings = importlib.import_module(get_settings_module(args.env))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    found = ensure_demo_teachers(db_config, password=args.demo_password)

    print(f"OK: seed applied -> {describe_target(db_config)} (demo teachers={found}/{len(DEMO_TEACHER_EMAILS)})")
    if found < len(DEMO_TEACHER_EMAILS):
        print("Some demo teachers are missing; run scripts/init_db.py --seed on an empty database.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

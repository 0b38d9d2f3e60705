"""Create the attendance database and apply database/schema.sql.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --env testing --seed
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

from src.attendance_tracker.attendance_tracker.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    describe_target,
    ensure_demo_teachers,
    list_tables,
)
from src.attendance_tracker.attendance_tracker.main import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", help="settings environment (default: APP_ENV)")
    parser.add_argument("--seed", action="store_true", help="also load database/seed.sql and the demo teachers")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module(args.env))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if args.seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_teachers(db_config)

    tables = list_tables(db_config)
    print(f"OK: schema applied -> {describe_target(db_config)} (tables={len(tables)}, seeded={args.seed})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

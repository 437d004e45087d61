"""Create the farm HR database (if missing) and apply the schema.

Usage: python scripts/init_db.py [--schema PATH] [--show-tables]

Safe to re-run: every table in schema.sql is CREATE TABLE IF NOT EXISTS.
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

from src.farm_hr.farm_hr.database.bootstrap import apply_schema, list_tables

# tables the API expects after a successful init
EXPECTED_TABLES = (
    "users",
    "attendance_records",
    "workoff_allotments",
    "workoff_days",
    "daily_work_reports",
    "report_summaries",
    "animals",
    "milk_records",
    "milk_sessions",
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql to the configured MySQL database")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--show-tables", action="store_true", help="print every table after applying")
    args = parser.parse_args()

    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)

    missing = [t for t in EXPECTED_TABLES if t not in tables]
    if missing:
        raise SystemExit(f"Schema applied but tables are missing: {', '.join(missing)}")

    print(
        f"OK: farm HR schema ready ({settings_module}) -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    if args.show_tables:
        for name in sorted(tables):
            print(f"  - {name}")


if __name__ == "__main__":
    main()

"""Grant (or revoke) the Admin super role for an existing user.

Usage: python scripts/grant_admin.py <username> [--revoke]
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

from src.farm_hr.farm_hr.core.enums import SuperRole
from src.farm_hr.farm_hr.database.connection import DBConfig, DatabaseConnection
from src.farm_hr.farm_hr.database.mysql_base import db_cursor


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant the Admin super role")
    parser.add_argument("username")
    parser.add_argument("--revoke", action="store_true")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    super_role = None if args.revoke else SuperRole.ADMIN.value
    with db_cursor(conn) as (_, cur):
        cur.execute("UPDATE users SET super_role=%s WHERE username=%s", (super_role, args.username))
        changed = cur.rowcount

    if not changed:
        raise SystemExit(f"No change for user '{args.username}' (missing or already set)")
    print(f"OK: {args.username} super_role={super_role}")


if __name__ == "__main__":
    main()

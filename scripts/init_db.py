"""Create the travelers schema for the configured environment."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.travel_checkin.travel_checkin.database.bootstrap import apply_schema, list_tables


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('database')} on {db_config.get('host')}:{db_config.get('port', 3306)}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    if "travelers" not in list_tables(db_config):
        print(f"travelers table missing after applying schema to {target}", file=sys.stderr)
        return 1
    print(f"travelers table ready in {target}")
    print(
        "gate departures on arrival check-in: "
        f"{settings.GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN}, "
        f"count checked-out as checked-in: {settings.COUNT_CHECKED_OUT_AS_CHECKED_IN}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

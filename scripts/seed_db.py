from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.travel_checkin.travel_checkin.container import build_container
from src.travel_checkin.travel_checkin.core.enums import SegmentKind

DEMO_GROUP = [
    ("Ana Lee", "AL66", "2024-08-10 09:15", "CA21", "2024-08-11 18:40", True, SegmentKind.DEPARTURE),
    ("Jane Doe", "BB12", "2024-08-09 14:05", "AA66", "2024-08-12 07:30", False, SegmentKind.DEPARTURE),
    ("Marco Rossi", "AL66", "2024-08-10 09:15", "MSC Aurora", "2024-08-13 16:00", False, SegmentKind.CRUISE),
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    service = build_container(db_config=db_config).traveler_service

    for name, arr_flight, arr_time, dep_flight, dep_time, hotel, dep_kind in DEMO_GROUP:
        service.add_individual(
            name=name,
            arrival_flight=arr_flight,
            arrival_time=arr_time,
            departure_flight=dep_flight,
            departure_time=dep_time,
            overnight_hotel=hotel,
            departure_kind=dep_kind,
        )

    print(
        f"OK: Seeded {len(DEMO_GROUP)} travelers -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()

"""Attach already-uploaded photos to their travelers.

Photos are uploaded as ``<person-key>-<timestamp>.<ext>``; this walks a
directory holding those files and writes ``<base-url>/<filename>`` to every
segment of the matching person.

Usage: python scripts/sync_photos.py <photo-dir> <base-url>
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.travel_checkin.travel_checkin.common.identifiers import person_key_from_photo_filename
from src.travel_checkin.travel_checkin.container import build_container

logger = logging.getLogger("sync_photos")

PHOTO_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp"}


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__)
        return 2
    photo_dir, base_url = Path(argv[0]), argv[1].rstrip("/")

    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    service = build_container(db_config=dict(settings.DB_CONFIG)).traveler_service

    matched = 0
    files = sorted(p for p in photo_dir.iterdir() if p.suffix.lower() in PHOTO_SUFFIXES)
    for path in files:
        person_key = person_key_from_photo_filename(path.name)
        result = service.attach_photo(person_key, f"{base_url}/{path.name}")
        logger.info("%s -> %s (%d rows)", path.name, person_key, result.rows_affected)
        matched += int(result.matched)

    print(f"OK: {matched}/{len(files)} photos attached")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

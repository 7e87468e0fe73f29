from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import TravelSegment
from .repository import TravelerRepository
from .transitions import PATCHABLE_FIELDS

_COLUMNS = (
    "id",
    "person_key",
    "name",
    "flight_label",
    "time_label",
    "kind",
    "checked_in",
    "check_in_time",
    "checked_out",
    "check_out_time",
    "overnight_hotel",
    "photo_url",
    "notes",
    "held",
    "hold_time",
    "is_being_transported",
    "transport_time",
)


def _set_clause(fields: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    # Column names come from a whitelist, never from the caller.
    names = [name for name in fields if name in PATCHABLE_FIELDS]
    if len(names) != len(fields):
        raise ValueError(f"Unknown columns: {sorted(set(fields) - PATCHABLE_FIELDS)}")
    return ", ".join(f"{name}=%s" for name in names), [fields[name] for name in names]


class MySQLTravelerRepository(TravelerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all_segments(self) -> List[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {', '.join(_COLUMNS)} FROM travelers ORDER BY created_at ASC, id ASC")
            return fetchall(cur)

    def update_segment_fields(self, segment_id: str, fields: Mapping[str, Any]) -> bool:
        set_sql, params = _set_clause(fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE travelers SET {set_sql} WHERE id=%s", (*params, str(segment_id)))
            return cur.rowcount > 0

    def insert_segments(self, segments: Sequence[TravelSegment]) -> int:
        rows = [
            (
                s.id,
                s.person_key,
                s.name,
                s.flight_label,
                s.time_label,
                s.kind.value,
                s.checked_in,
                s.check_in_time,
                s.checked_out,
                s.check_out_time,
                s.overnight_hotel,
                s.photo_url,
                s.notes,
                s.held,
                s.hold_time,
                s.is_being_transported,
                s.transport_time,
            )
            for s in segments
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO travelers({', '.join(_COLUMNS)}) VALUES({in_clause(_COLUMNS)})",
                rows,
            )
            return len(rows)

    def count_by_person_keys(self, keys: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS matched FROM travelers WHERE person_key IN ({in_clause(keys)})", tuple(keys))
            row = fetchone(cur)
            return int(row["matched"]) if row else 0

    def update_by_person_keys(self, keys: Sequence[str], fields: Mapping[str, Any]) -> int:
        set_sql, params = _set_clause(fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE travelers SET {set_sql} WHERE person_key IN ({in_clause(keys)})",
                (*params, *keys),
            )
            return int(cur.rowcount)

    def delete_by_person_keys(self, keys: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM travelers WHERE person_key IN ({in_clause(keys)})", tuple(keys))
            return int(cur.rowcount)

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol, Sequence

from .model import TravelSegment


class TravelerRepository(Protocol):
    def list_all_segments(self) -> List[Dict[str, Any]]:
        """Full snapshot of raw segment rows; reconciliation does the defaulting."""
        raise NotImplementedError

    def update_segment_fields(self, segment_id: str, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def insert_segments(self, segments: Sequence[TravelSegment]) -> int:
        """Insert all segments in one transaction (the arrival+departure pair)."""
        raise NotImplementedError

    def count_by_person_keys(self, keys: Sequence[str]) -> int:
        """Rows whose person_key is in ``keys``, whether or not a write would change them."""
        raise NotImplementedError

    def update_by_person_keys(self, keys: Sequence[str], fields: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def delete_by_person_keys(self, keys: Sequence[str]) -> int:
        raise NotImplementedError

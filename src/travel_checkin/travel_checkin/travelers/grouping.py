from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .model import TravelSegment


def flight_group_key(segment: TravelSegment) -> str:
    return f"{segment.time_label} - {segment.flight_label}"


def group_by_flight(segments: Iterable[TravelSegment]) -> List[Tuple[str, List[TravelSegment]]]:
    """Bucket segments by ``"<time> - <flight>"``, ordered by plain string comparison.

    No calendar awareness: time labels must already sort lexicographically.
    """
    groups: Dict[str, List[TravelSegment]] = {}
    for segment in segments:
        groups.setdefault(flight_group_key(segment), []).append(segment)
    return sorted(groups.items(), key=lambda item: item[0])

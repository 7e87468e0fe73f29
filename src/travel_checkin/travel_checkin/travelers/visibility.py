from __future__ import annotations

from typing import List, Mapping, Sequence

from .model import Person, TravelSegment


def has_checked_in_arrival(person: Person) -> bool:
    return any(seg.checked_in is True for seg in person.arrival_segments)


def filter_departures_for_display(
    all_departures: Sequence[TravelSegment],
    persons_by_key: Mapping[str, Person],
) -> List[TravelSegment]:
    """Departures whose person has at least one checked-in arrival.

    Only the display list is filtered; the input sequence is left untouched.
    """
    visible: List[TravelSegment] = []
    for segment in all_departures:
        person = persons_by_key.get(segment.person_key)
        if person is not None and has_checked_in_arrival(person):
            visible.append(segment)
    return visible

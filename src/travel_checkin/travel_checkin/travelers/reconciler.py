"""Fold a flat list of travel segments into per-person aggregates.

Everything here is pure: no I/O, no clock reads, and output order follows
input order only, so two calls on the same records compare equal.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..common.identifiers import key_from_name
from ..core.constants import (
    DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
    DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
)
from ..core.enums import SegmentKind
from ..core.exceptions import ReconciliationInputError
from .model import Person, ReconcileResult, SkippedRecord, TravelSegment
from .visibility import filter_departures_for_display

logger = logging.getLogger(__name__)

SegmentRecord = Union[TravelSegment, Mapping[str, Any]]

_BOOL_FIELDS = ("checked_in", "checked_out", "overnight_hotel", "held", "is_being_transported")
_NULLABLE_FIELDS = (
    "check_in_time",
    "check_out_time",
    "photo_url",
    "notes",
    "hold_time",
    "transport_time",
)


def resolve_person_key(stored_key: Optional[str], name: Optional[str]) -> Optional[str]:
    """Stored key wins over the name so renames never split a person's history."""
    if stored_key is not None and str(stored_key).strip():
        return str(stored_key).strip()
    if name is None or name == "":
        return None
    return key_from_name(name)


def _parse_kind(value: Any) -> SegmentKind:
    if isinstance(value, SegmentKind):
        return value
    return SegmentKind(str(value).strip().lower())


def segment_from_row(row: SegmentRecord) -> TravelSegment:
    """Default every optional field to its rest state and resolve the person key.

    Raises ``ReconciliationInputError`` for records no person can be derived from.
    """
    if isinstance(row, TravelSegment):
        row = dataclasses.asdict(row)

    segment_id = row.get("id")
    if segment_id is None or str(segment_id) == "":
        raise ReconciliationInputError(segment_id, "missing segment id")

    name = row.get("name")
    person_key = resolve_person_key(row.get("person_key"), name)
    if person_key is None:
        raise ReconciliationInputError(segment_id, "missing both person key and name")

    try:
        kind = _parse_kind(row.get("kind"))
    except ValueError:
        raise ReconciliationInputError(segment_id, f"unknown segment kind {row.get('kind')!r}") from None

    values: Dict[str, Any] = {f: bool(row.get(f) or False) for f in _BOOL_FIELDS}
    values.update({f: row.get(f) or None for f in _NULLABLE_FIELDS})

    return TravelSegment(
        id=str(segment_id),
        name=name,
        flight_label=str(row.get("flight_label") or ""),
        time_label=str(row.get("time_label") or ""),
        kind=kind,
        person_key=person_key,
        **values,
    )


def _is_checked_in(segment: TravelSegment, count_checked_out: bool) -> bool:
    return segment.checked_in or (count_checked_out and segment.checked_out)


def reconcile(
    records: Iterable[SegmentRecord],
    *,
    gate_departures: bool = DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
    count_checked_out: bool = DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
) -> ReconcileResult:
    """Group segments into persons and split them into arrivals/departures.

    ``departures`` is gated on arrival check-in when ``gate_departures`` is set;
    ``all_departures`` never is. Malformed records are skipped and reported in
    ``skipped`` instead of being merged into an unrelated person.
    """
    people: Dict[str, Person] = {}
    segments: List[TravelSegment] = []
    arrivals: List[TravelSegment] = []
    departures: List[TravelSegment] = []
    skipped: List[SkippedRecord] = []

    for record in records:
        try:
            segment = segment_from_row(record)
        except ReconciliationInputError as exc:
            skipped.append(SkippedRecord(segment_id=exc.segment_id, reason=exc.reason))
            continue

        person = people.get(segment.person_key)
        if person is None:
            person = Person(
                person_key=segment.person_key,
                name=segment.name,
                photo_url=segment.photo_url,
                notes=segment.notes,
            )
            people[segment.person_key] = person

        # first non-null wins; later segments never overwrite
        if person.photo_url is None and segment.photo_url is not None:
            person.photo_url = segment.photo_url
        if person.notes is None and segment.notes is not None:
            person.notes = segment.notes

        segments.append(segment)
        if segment.kind.is_departure:
            person.departure_segments.append(segment)
            departures.append(segment)
        else:
            person.arrival_segments.append(segment)
            arrivals.append(segment)

    for person in people.values():
        person.is_any_segment_checked_in = any(
            _is_checked_in(s, count_checked_out)
            for s in person.arrival_segments + person.departure_segments
        )
        person.is_any_segment_checked_out = any(s.checked_out for s in person.departure_segments)

    if skipped:
        logger.warning(
            "Skipped %d malformed travel segment(s): %s",
            len(skipped),
            "; ".join(f"{s.segment_id!r}: {s.reason}" for s in skipped),
        )

    visible = filter_departures_for_display(departures, people) if gate_departures else list(departures)

    return ReconcileResult(
        arrivals=arrivals,
        departures=visible,
        all_departures=departures,
        persons=list(people.values()),
        skipped=skipped,
        segments=segments,
    )

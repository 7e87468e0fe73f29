from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..core.enums import SegmentKind


@dataclass(frozen=True)
class TravelSegment:
    """One leg (arrival or departure/cruise) of one person's trip.

    ``time_label`` is opaque free text; it is only ever compared as a string.
    Optional fields are always explicit ``None``/``False`` once a segment has
    passed through ``reconciler.segment_from_row``.
    """

    id: str
    name: Optional[str]
    flight_label: str
    time_label: str
    kind: SegmentKind
    person_key: Optional[str] = None
    checked_in: bool = False
    check_in_time: Optional[datetime] = None
    checked_out: bool = False
    check_out_time: Optional[datetime] = None
    overnight_hotel: bool = False
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    held: bool = False
    hold_time: Optional[datetime] = None
    is_being_transported: bool = False
    transport_time: Optional[datetime] = None


@dataclass
class Person:
    """Derived aggregate; recomputed from segments, never persisted."""

    person_key: str
    name: Optional[str]
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    arrival_segments: List[TravelSegment] = field(default_factory=list)
    departure_segments: List[TravelSegment] = field(default_factory=list)
    is_any_segment_checked_in: bool = False
    is_any_segment_checked_out: bool = False


@dataclass(frozen=True)
class SkippedRecord:
    segment_id: Optional[str]
    reason: str


@dataclass(frozen=True)
class ReconcileResult:
    arrivals: List[TravelSegment]
    departures: List[TravelSegment]
    all_departures: List[TravelSegment]
    persons: List[Person]
    skipped: List[SkippedRecord] = field(default_factory=list)
    # accepted segments in input order, used to re-reconcile after a local patch
    segments: List[TravelSegment] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def persons_by_key(self) -> dict[str, Person]:
        return {p.person_key: p for p in self.persons}

    @classmethod
    def empty(cls) -> "ReconcileResult":
        return cls(arrivals=[], departures=[], all_departures=[], persons=[])


@dataclass(frozen=True)
class PersonWriteResult:
    rows_affected: int
    used_fallback: bool = False

    @property
    def matched(self) -> bool:
        return self.rows_affected > 0


@dataclass(frozen=True)
class DashboardStats:
    total: int
    checked_in: int
    departed: int
    pending: int

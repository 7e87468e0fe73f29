from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..common.identifiers import candidate_keys, canonicalize_id, key_from_name
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_NAME_LENGTH
from ..core.enums import SegmentKind
from ..core.exceptions import PersistenceError, ValidationError
from .grouping import group_by_flight
from .model import DashboardStats, Person, PersonWriteResult, ReconcileResult, TravelSegment
from .repository import TravelerRepository
from .store import TravelerStore

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def compute_stats(persons: Iterable[Person]) -> DashboardStats:
    persons = list(persons)
    total = len(persons)
    checked_in = sum(1 for p in persons if p.is_any_segment_checked_in)
    departed = sum(1 for p in persons if p.is_any_segment_checked_out)
    return DashboardStats(total=total, checked_in=checked_in, departed=departed, pending=total - checked_in)


def _new_segment_id() -> str:
    return uuid.uuid4().hex


class TravelerService:
    """Person-level workflows on top of the store and repository.

    Writes keyed by person go to the canonical key first and only fall back to
    the historical key variants when nothing matched.
    """

    def __init__(
        self,
        travelers: TravelerRepository,
        store: TravelerStore,
        *,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._travelers = travelers
        self._store = store
        self._id_factory = id_factory or _new_segment_id

    @property
    def store(self) -> TravelerStore:
        return self._store

    def load(self) -> ReconcileResult:
        return self._store.refresh()

    def add_individual(
        self,
        *,
        name: str,
        arrival_flight: str,
        arrival_time: str,
        departure_flight: str,
        departure_time: str,
        overnight_hotel: bool = False,
        departure_kind: SegmentKind = SegmentKind.DEPARTURE,
    ) -> Tuple[TravelSegment, TravelSegment]:
        """Create the matched arrival + departure pair for a new traveler."""
        name = require_min_length(name, "Name", MIN_NAME_LENGTH)
        arrival_flight = require_non_empty(arrival_flight, "Arrival flight")
        arrival_time = require_non_empty(arrival_time, "Arrival time")
        departure_flight = require_non_empty(departure_flight, "Departure flight")
        departure_time = require_non_empty(departure_time, "Departure time")
        if not departure_kind.is_departure:
            raise ValidationError("Departure leg must be a departure or cruise")

        person_key = key_from_name(name)
        arrival = TravelSegment(
            id=self._id_factory(),
            person_key=person_key,
            name=name,
            flight_label=arrival_flight,
            time_label=arrival_time,
            kind=SegmentKind.ARRIVAL,
            overnight_hotel=bool(overnight_hotel),
        )
        departure = TravelSegment(
            id=self._id_factory(),
            person_key=person_key,
            name=name,
            flight_label=departure_flight,
            time_label=departure_time,
            kind=departure_kind,
        )

        self._travelers.insert_segments([arrival, departure])
        logger.info("Added %s (%s)", name, person_key)
        self._store.refresh()
        return arrival, departure

    def _write_by_person(self, person_key: str, op: Callable[[Sequence[str]], int], action: str) -> PersonWriteResult:
        # rowcount of a write may only count changed rows, so matches are counted first
        canonical = canonicalize_id(person_key)
        keys: Sequence[str] = [canonical]
        used_fallback = False
        try:
            matched = self._travelers.count_by_person_keys(keys)
            if matched == 0:
                keys = candidate_keys(canonical)
                used_fallback = True
                logger.info("%s matched nothing for %s, retrying with %s", action, canonical, keys)
                matched = self._travelers.count_by_person_keys(keys)
            if matched == 0:
                logger.warning("%s: no travelers matched person key candidates %s", action, keys)
                return PersonWriteResult(rows_affected=0, used_fallback=used_fallback)
            op(keys)
        except PersistenceError:
            self._store.resync()
            raise

        return PersonWriteResult(rows_affected=matched, used_fallback=used_fallback)

    def update_person(self, person_key: str, *, photo_url: Any = _UNSET, notes: Any = _UNSET) -> PersonWriteResult:
        """Write photo and/or notes to every segment of one person."""
        fields: Dict[str, Any] = {}
        if photo_url is not _UNSET:
            fields["photo_url"] = photo_url or None
        if notes is not _UNSET:
            fields["notes"] = notes or None
        if not fields:
            raise ValidationError("Nothing to update")

        result = self._write_by_person(
            person_key,
            lambda keys: self._travelers.update_by_person_keys(keys, fields),
            "update person",
        )
        self._store.refresh()
        return result

    def attach_photo(self, person_key: str, photo_url: str) -> PersonWriteResult:
        return self.update_person(person_key, photo_url=require_non_empty(photo_url, "Photo URL"))

    def delete_person(self, person_key: str) -> int:
        result = self._write_by_person(person_key, self._travelers.delete_by_person_keys, "delete person")
        logger.info("Rows deleted for %s: %d", person_key, result.rows_affected)
        self._store.refresh()
        return result.rows_affected

    def stats(self) -> DashboardStats:
        return compute_stats(self._store.snapshot.persons)

    def flight_groups(self, kind: SegmentKind) -> List[Tuple[str, List[TravelSegment]]]:
        snapshot = self._store.snapshot
        return group_by_flight(snapshot.arrivals if kind is SegmentKind.ARRIVAL else snapshot.departures)

"""Local traveler snapshot with optimistic writes.

A write is a two-phase commit: the patch is applied to a local copy (via the
pure ``transitions.apply_patch``) and re-reconciled, then persisted. If the
store rejects it, the local copy is thrown away and rebuilt from a fresh
authoritative read.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Set

from ..common.datetime_utils import now_local
from ..core.constants import (
    DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
    DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
)
from ..core.enums import FlagPair
from ..core.exceptions import MutationInFlightError, PersistenceError
from .model import ReconcileResult, TravelSegment
from .reconciler import reconcile
from .repository import TravelerRepository
from .transitions import activate, apply_patch, deactivate, set_active, validate_patch

logger = logging.getLogger(__name__)


class TravelerStore:
    def __init__(
        self,
        travelers: TravelerRepository,
        *,
        gate_departures: bool = DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
        count_checked_out: bool = DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._travelers = travelers
        self._gate_departures = bool(gate_departures)
        self._count_checked_out = bool(count_checked_out)
        self._now = now or now_local
        self._lock = threading.Lock()
        self._issued = 0
        self._pending: Set[str] = set()
        self._result = ReconcileResult.empty()

    @property
    def snapshot(self) -> ReconcileResult:
        with self._lock:
            return self._result

    def get_segment(self, segment_id: str) -> Optional[TravelSegment]:
        for segment in self.snapshot.segments:
            if segment.id == str(segment_id):
                return segment
        return None

    def is_pending(self, segment_id: str) -> bool:
        with self._lock:
            return str(segment_id) in self._pending

    def _reconcile(self, records) -> ReconcileResult:
        return reconcile(
            records,
            gate_departures=self._gate_departures,
            count_checked_out=self._count_checked_out,
        )

    def refresh(self) -> ReconcileResult:
        """Full read + reconcile. Only the most recently issued refresh is applied.

        A failed read leaves an empty snapshot behind and re-raises.
        """
        with self._lock:
            self._issued += 1
            token = self._issued

        try:
            rows = self._travelers.list_all_segments()
        except PersistenceError:
            with self._lock:
                if token == self._issued:
                    self._result = ReconcileResult.empty()
            raise

        result = self._reconcile(rows)
        with self._lock:
            if token != self._issued:
                logger.debug("Discarding stale refresh #%d (latest #%d)", token, self._issued)
                return self._result
            self._result = result
            return result

    def resync(self) -> None:
        """Refresh after a failed write; the write error stays the one reported."""
        try:
            self.refresh()
        except PersistenceError as exc:
            logger.error("Resync after failed write also failed: %s", exc)

    def _patch_local(self, segment_id: str, patch: Mapping[str, Any]) -> None:
        current = self._result
        segments = [apply_patch(s, patch) if s.id == segment_id else s for s in current.segments]
        patched = self._reconcile(segments)
        self._result = ReconcileResult(
            arrivals=patched.arrivals,
            departures=patched.departures,
            all_departures=patched.all_departures,
            persons=patched.persons,
            skipped=current.skipped,
            segments=patched.segments,
        )

    def update_segment(self, segment_id: str, patch: Mapping[str, Any]) -> None:
        """Optimistically patch one segment and persist it.

        Raises ``MutationInFlightError`` if the same segment is already being
        written, and ``PersistenceError`` (after a resync) if the store fails.
        """
        segment_id = str(segment_id)
        patch = validate_patch(patch)

        with self._lock:
            if segment_id in self._pending:
                raise MutationInFlightError(segment_id)
            self._pending.add(segment_id)
            # any refresh already reading predates this write
            self._issued += 1
            self._patch_local(segment_id, patch)

        try:
            matched = self._travelers.update_segment_fields(segment_id, patch)
        except PersistenceError as exc:
            logger.warning("Update of segment %s failed, reverting local state: %s", segment_id, exc)
            self.resync()
            raise
        finally:
            with self._lock:
                self._pending.discard(segment_id)

        if not matched:
            logger.warning("Update of segment %s matched no stored row; local cache is stale", segment_id)
            self.resync()

    def check_in(self, segment_id: str) -> None:
        self.update_segment(segment_id, activate(FlagPair.CHECK_IN, self._now()))

    def undo_check_in(self, segment_id: str) -> None:
        self.update_segment(segment_id, deactivate(FlagPair.CHECK_IN))

    def check_out(self, segment_id: str) -> None:
        self.update_segment(segment_id, activate(FlagPair.CHECK_OUT, self._now()))

    def undo_check_out(self, segment_id: str) -> None:
        self.update_segment(segment_id, deactivate(FlagPair.CHECK_OUT))

    def set_held(self, segment_id: str, held: bool) -> None:
        self.update_segment(segment_id, set_active(FlagPair.HOLD, held, self._now()))

    def set_transported(self, segment_id: str, transported: bool) -> None:
        self.update_segment(segment_id, set_active(FlagPair.TRANSPORT, transported, self._now()))

    def update_notes(self, segment_id: str, notes: Optional[str]) -> None:
        self.update_segment(segment_id, {"notes": notes})

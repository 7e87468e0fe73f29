from __future__ import annotations

from datetime import datetime

import pytest

from src.travel_checkin.travel_checkin.core.exceptions import (
    MutationInFlightError,
    PersistenceError,
    ValidationError,
)
from src.travel_checkin.travel_checkin.travelers.store import TravelerStore
from tests.travelers.fakes import FixedClock, InMemoryTravelers, make_row

NOW = datetime(2024, 8, 10, 9, 30)


def _store(rows, **kwargs):
    repo = InMemoryTravelers(rows)
    store = TravelerStore(repo, now=FixedClock(NOW), **kwargs)
    store.refresh()
    return repo, store


def _pair():
    return [make_row("arr", "Ana Lee", "arrival"), make_row("dep", "Ana Lee", "departure")]


def test_check_in_patches_locally_and_persists():
    repo, store = _store(_pair())

    store.check_in("arr")

    assert store.get_segment("arr").checked_in is True
    assert store.get_segment("arr").check_in_time == NOW
    assert repo.rows[0]["checked_in"] is True
    assert repo.rows[0]["check_in_time"] == NOW
    # departure unlocked without a refetch
    assert [s.id for s in store.snapshot.departures] == ["dep"]
    assert store.snapshot.persons[0].is_any_segment_checked_in is True


def test_optimistic_snapshot_equals_fresh_reconcile():
    repo, store = _store(_pair())

    store.check_in("arr")
    store.update_notes("dep", "needs wheelchair")
    optimistic = store.snapshot

    assert store.refresh() == optimistic


def test_undo_clears_time():
    _, store = _store(_pair())

    store.check_out("dep")
    store.undo_check_out("dep")

    seg = store.get_segment("dep")
    assert seg.checked_out is False and seg.check_out_time is None


def test_failed_write_discards_local_patch():
    repo, store = _store(_pair())
    repo.fail_writes = True

    with pytest.raises(PersistenceError):
        store.check_in("arr")

    assert store.get_segment("arr").checked_in is False
    assert store.snapshot.departures == []
    assert not store.is_pending("arr")


def test_failed_write_with_failed_resync_leaves_empty_snapshot():
    repo, store = _store(_pair())
    repo.fail_writes = True
    repo.fail_reads = True

    with pytest.raises(PersistenceError, match="write failed"):
        store.set_held("arr", True)

    assert store.snapshot.persons == []


def test_failed_read_falls_back_to_empty_result():
    repo, store = _store(_pair())
    repo.fail_reads = True

    with pytest.raises(PersistenceError):
        store.refresh()

    assert store.snapshot.arrivals == []
    assert store.snapshot.persons == []


def test_second_mutation_for_same_segment_is_rejected_while_pending():
    repo, store = _store(_pair())
    seen = {}

    def concurrent(segment_id):
        with pytest.raises(MutationInFlightError):
            store.undo_check_in(segment_id)
        # a different segment is not blocked
        store.set_transported("dep", True)
        seen["ok"] = True

    repo.on_update = concurrent
    store.check_in("arr")

    assert seen == {"ok": True}
    assert store.get_segment("arr").checked_in is True
    assert store.get_segment("dep").is_being_transported is True
    assert not store.is_pending("arr")


def test_stale_refresh_result_is_discarded():
    repo, store = _store(_pair())

    def newer_refresh():
        repo.rows.append(make_row("late", "Bo Li", "arrival"))
        store.refresh()

    repo.on_read = newer_refresh
    result = store.refresh()

    assert [s.id for s in result.arrivals] == ["arr", "late"]
    assert [s.id for s in store.snapshot.arrivals] == ["arr", "late"]


def test_update_of_unknown_row_resyncs():
    repo, store = _store(_pair())
    repo.rows.pop(0)

    store.check_in("arr")

    assert store.get_segment("arr") is None
    assert [s.id for s in store.snapshot.segments] == ["dep"]


def test_unknown_fields_are_rejected_before_any_write():
    repo, store = _store(_pair())

    with pytest.raises(ValidationError):
        store.update_segment("arr", {"name": "Someone Else"})

    assert not store.is_pending("arr")
    assert repo.rows[0]["name"] == "Ana Lee"


def test_gate_flag_off_shows_every_departure():
    _, store = _store(_pair(), gate_departures=False)

    assert [s.id for s in store.snapshot.departures] == ["dep"]


@pytest.mark.parametrize(
    "patch",
    [
        {"checked_in": True},
        {"check_in_time": NOW},
        {"checked_in": True, "check_in_time": None},
        {"held": False, "hold_time": NOW},
    ],
)
def test_flag_without_matching_timestamp_is_rejected(patch):
    repo, store = _store(_pair())

    with pytest.raises(ValidationError):
        store.update_segment("arr", patch)

    seg = store.get_segment("arr")
    assert seg.checked_in is False and seg.check_in_time is None
    assert "checked_in" not in repo.rows[0]
    assert not store.is_pending("arr")


def test_refresh_started_before_a_write_does_not_revert_it():
    repo, store = _store(_pair())
    # the read has already copied the rows when the check-in lands
    repo.on_read = lambda: store.check_in("arr")

    store.refresh()

    assert store.get_segment("arr").checked_in is True
    assert [s.id for s in store.snapshot.departures] == ["dep"]

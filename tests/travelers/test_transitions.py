from __future__ import annotations

from datetime import datetime

import pytest

from src.travel_checkin.travel_checkin.core.enums import FlagPair
from src.travel_checkin.travel_checkin.core.exceptions import ValidationError
from src.travel_checkin.travel_checkin.travelers.reconciler import segment_from_row
from src.travel_checkin.travel_checkin.travelers.transitions import activate, apply_patch, deactivate, set_active
from tests.travelers.fakes import make_row

T1 = datetime(2024, 8, 10, 9, 15)
T2 = datetime(2024, 8, 10, 9, 45)


def test_check_in_then_undo_couples_flag_and_time():
    seg = segment_from_row(make_row("1", "Ana Lee"))

    checked = apply_patch(seg, activate(FlagPair.CHECK_IN, T1))
    assert checked.checked_in is True
    assert checked.check_in_time == T1

    undone = apply_patch(checked, deactivate(FlagPair.CHECK_IN))
    assert undone.checked_in is False
    assert undone.check_in_time is None


@pytest.mark.parametrize("pair", list(FlagPair))
def test_every_pair_behaves_the_same(pair):
    seg = segment_from_row(make_row("1", "Ana Lee", "departure"))

    active = apply_patch(seg, set_active(pair, True, T1))
    assert getattr(active, pair.flag_field) is True
    assert getattr(active, pair.time_field) == T1

    inactive = apply_patch(active, set_active(pair, False, T2))
    assert getattr(inactive, pair.flag_field) is False
    assert getattr(inactive, pair.time_field) is None


def test_activating_twice_refreshes_timestamp():
    seg = segment_from_row(make_row("1", "Ana Lee"))

    first = apply_patch(seg, activate(FlagPair.HOLD, T1))
    second = apply_patch(first, activate(FlagPair.HOLD, T2))

    assert second.held is True
    assert second.hold_time == T2


def test_patch_only_touches_named_fields():
    seg = segment_from_row(make_row("1", "Ana Lee", notes="late", overnight_hotel=True))

    patched = apply_patch(seg, activate(FlagPair.CHECK_OUT, T1))

    assert patched.notes == "late"
    assert patched.overnight_hotel is True
    assert patched.checked_in is False
    assert patched.person_key == seg.person_key


def test_patched_segment_matches_freshly_reconciled_one():
    row = make_row("1", "Ana Lee", notes="")
    patched = apply_patch(segment_from_row(row), {"checked_in": True, "check_in_time": T1, "photo_url": ""})

    fresh = segment_from_row({**row, "checked_in": 1, "check_in_time": T1, "photo_url": None})
    assert patched == fresh


@pytest.mark.parametrize("patch", [{}, {"kind": "cruise"}, {"id": "2"}, {"person_key": "person-x"}])
def test_rejects_unknown_or_empty_patches(patch):
    seg = segment_from_row(make_row("1", "Ana Lee"))

    with pytest.raises(ValidationError):
        apply_patch(seg, patch)


@pytest.mark.parametrize(
    "patch",
    [
        {"checked_out": True},
        {"transport_time": T1},
        {"held": True, "hold_time": None},
        {"is_being_transported": False, "transport_time": T1},
    ],
)
def test_flag_and_time_must_be_patched_together(patch):
    seg = segment_from_row(make_row("1", "Ana Lee", "departure"))

    with pytest.raises(ValidationError):
        apply_patch(seg, patch)

"""Pure state transitions for the monotonic workflow flags.

Each ``FlagPair`` is either inactive (flag False, time None) or active (flag
True, time set). Transitions only build patches; ``apply_patch`` applies one
to a local copy of a segment using the same defaulting as reconciliation.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Dict, Mapping

from ..core.enums import FlagPair
from ..core.exceptions import ValidationError
from .model import TravelSegment
from .reconciler import segment_from_row

PATCHABLE_FIELDS = frozenset(
    [pair.flag_field for pair in FlagPair]
    + [pair.time_field for pair in FlagPair]
    + ["overnight_hotel", "photo_url", "notes", "flight_label", "time_label"]
)


def activate(pair: FlagPair, now: datetime) -> Dict[str, Any]:
    # Re-activating an active pair refreshes the timestamp.
    return {pair.flag_field: True, pair.time_field: now}


def deactivate(pair: FlagPair) -> Dict[str, Any]:
    return {pair.flag_field: False, pair.time_field: None}


def set_active(pair: FlagPair, active: bool, now: datetime) -> Dict[str, Any]:
    return activate(pair, now) if active else deactivate(pair)


def validate_patch(patch: Mapping[str, Any]) -> Dict[str, Any]:
    if not patch:
        raise ValidationError("Nothing to update")
    unknown = sorted(set(patch) - PATCHABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

    # a flag and its timestamp always travel together
    for pair in FlagPair:
        named = {pair.flag_field, pair.time_field} & set(patch)
        if not named:
            continue
        if len(named) == 1:
            raise ValidationError(f"{pair.flag_field} and {pair.time_field} must be updated together")
        if bool(patch[pair.flag_field]) != (patch[pair.time_field] is not None):
            raise ValidationError(f"{pair.time_field} must be set exactly when {pair.flag_field} is true")
    return dict(patch)


def apply_patch(segment: TravelSegment, patch: Mapping[str, Any]) -> TravelSegment:
    """Return a patched copy, indistinguishable from a freshly reconciled segment."""
    merged = dataclasses.asdict(segment)
    merged.update(validate_patch(patch))
    return segment_from_row(merged)

from __future__ import annotations

from enum import Enum


class SegmentKind(str, Enum):
    """Direction of one travel leg, as stored in the ``travelers`` table."""

    ARRIVAL = "arrival"
    DEPARTURE = "departure"
    CRUISE = "cruise"

    @property
    def is_departure(self) -> bool:
        # Cruise legs aggregate exactly like departures.
        return self is not SegmentKind.ARRIVAL


class FlagPair(Enum):
    """Monotonic workflow flags, each coupled to the timestamp of its activation."""

    CHECK_IN = ("checked_in", "check_in_time")
    CHECK_OUT = ("checked_out", "check_out_time")
    HOLD = ("held", "hold_time")
    TRANSPORT = ("is_being_transported", "transport_time")

    @property
    def flag_field(self) -> str:
        return self.value[0]

    @property
    def time_field(self) -> str:
        return self.value[1]

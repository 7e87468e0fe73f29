"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

PERSON_KEY_PREFIX = "person-"

# Product-behaviour defaults, overridable from settings.
DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN = True
DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN = True

MIN_NAME_LENGTH = 2
TIME_LABEL_FORMAT = "%Y-%m-%d"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# UTC+05:30, the department's civil timezone.
DEFAULT_TIMEZONE_OFFSET_MINUTES = 330
DEFAULT_TIME_OFFSET_MINUTES = 0

DEFAULT_SESSION_DAYS = 7

# Report look-back windows (days before today).
REPORT_WINDOW_DAYS = {
    "week": 7,
    "month": 30,
}

UPCOMING_PERIOD_HOURS = 2

# Grid cell key used when no timetable period applies.
GENERAL_CELL = "general"

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

# The teacher timetable page only lists teaching days.
TEACHING_DAYS = (1, 2, 3, 4, 5, 6)

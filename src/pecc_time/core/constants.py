"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Payroll policy: a contractor's daily rate covers this many hours.
STANDARD_WORKDAY_HOURS = 8

MIN_PASSWORD_LENGTH = 8
DEFAULT_REMOTE_TIMEOUT_SECONDS = 10.0
DEFAULT_ASSISTANT_TIMEOUT_SECONDS = 15.0

USERS_SLOT = "pecc_time_users"
ENTRIES_SLOT = "pecc_time_entries"
SUBMISSIONS_SLOT = "pecc_time_submissions"

LOCATION_UNAVAILABLE = "Location details could not be retrieved."
ASSISTANT_UNAVAILABLE = "Sorry, I could not process that request."

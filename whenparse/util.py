"""Utility constants for whenparse.

Time unit constants represent durations in seconds.
Months and years are deliberately absent: they have no fixed length.
"""

from datetime import timedelta

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800

# Largest offset a timedelta can carry, in whole seconds
MAX_OFFSET_SECONDS = int(timedelta.max.total_seconds())

# Quantities longer than this can never fit MAX_OFFSET_SECONDS
MAX_QUANTITY_DIGITS = len(str(MAX_OFFSET_SECONDS))

"""Clock shown on the new-tab page."""

from __future__ import annotations

import time
from typing import Optional

# The clock is shown at a fixed offset from UTC.
UTC_OFFSET_HOURS = 8


def clock_components(total_seconds: Optional[int] = None) -> tuple[int, int, int]:
    """Hours, minutes and seconds for a Unix time; the current time by default."""
    if total_seconds is None:
        total_seconds = int(time.time())
    if total_seconds < 0:
        raise ValueError(f"time before the epoch: {total_seconds}")
    hours = (total_seconds // 3600 + UTC_OFFSET_HOURS) % 24
    minutes = (total_seconds // 60) % 60
    seconds = total_seconds % 60
    return hours, minutes, seconds


def clock_text(total_seconds: Optional[int] = None) -> tuple[str, str]:
    """The large ``HH:MM`` text and the small ``SS`` text of the clock."""
    hours, minutes, seconds = clock_components(total_seconds)
    return f"{hours:02}:{minutes:02}", f"{seconds:02}"
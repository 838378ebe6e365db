# backend/expiry_notifier/services/expiry_window.py
"""Day-granularity scan window for items expiring tomorrow"""

from datetime import datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from expiry_notifier.models.records import ScanWindow

END_OF_DAY = time(23, 59, 59, 999000)


def compute_scan_window(reference: datetime, tz: Optional[str] = None) -> ScanWindow:
    """
    Return [00:00:00.000, 23:59:59.999] of the calendar day after reference.

    With tz unset the server's local zone is used. A naive reference is taken
    to be wall-clock time in that zone.
    """
    if tz:
        zone = ZoneInfo(tz)
        local_ref = reference.astimezone(zone) if reference.tzinfo else reference.replace(tzinfo=zone)
        next_day = local_ref.date() + timedelta(days=1)
        return ScanWindow(
            start=datetime.combine(next_day, time.min, tzinfo=zone),
            end=datetime.combine(next_day, END_OF_DAY, tzinfo=zone),
        )

    # astimezone() on a naive datetime resolves the local offset for that moment,
    # so each boundary picks up its own DST offset
    local_ref = reference.astimezone()
    next_day = local_ref.date() + timedelta(days=1)
    return ScanWindow(
        start=datetime.combine(next_day, time.min).astimezone(),
        end=datetime.combine(next_day, END_OF_DAY).astimezone(),
    )

"""
TEST FILE: test_expiry_window.py
Testing: compute_scan_window() from expiry_window.py

Function Signature:
def compute_scan_window(reference: datetime, tz: Optional[str] = None) -> ScanWindow
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from expiry_notifier.models.records import ScanWindow
from expiry_notifier.services.expiry_window import compute_scan_window

HCM = ZoneInfo("Asia/Ho_Chi_Minh")


class TestComputeScanWindow:

    def test_window_covers_the_next_calendar_day(self, scan_now):
        """TEST 1: 15:30 on the 19th scans the whole of the 20th"""
        # Act
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        # Assert
        assert window.start == datetime(2026, 10, 20, 0, 0, 0, tzinfo=HCM)
        assert window.end == datetime(2026, 10, 20, 23, 59, 59, 999000, tzinfo=HCM)

    def test_reference_is_converted_into_the_scan_zone(self):
        """TEST 2: 20:00 UTC is already 03:00 next day in Ho Chi Minh City"""
        reference = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

        window = compute_scan_window(reference, "Asia/Ho_Chi_Minh")

        assert window.start.date() == date(2026, 10, 21)
        assert window.end.date() == date(2026, 10, 21)

    def test_naive_reference_is_wall_clock_time_in_zone(self):
        """TEST 3: Naive reference on New Year's Eve rolls into the next year"""
        window = compute_scan_window(datetime(2026, 12, 31, 23, 59, 59), "UTC")

        assert window.start == datetime(2027, 1, 1, tzinfo=ZoneInfo("UTC"))
        assert window.end == datetime(2027, 1, 1, 23, 59, 59, 999000, tzinfo=ZoneInfo("UTC"))

    def test_dst_transition_day_keeps_wall_clock_bounds(self):
        """TEST 4: Day on which clocks fall back is 25 hours long"""
        new_york = ZoneInfo("America/New_York")
        reference = datetime(2026, 10, 31, 12, 0, tzinfo=new_york)

        window = compute_scan_window(reference, "America/New_York")

        assert window.start.utcoffset() == timedelta(hours=-4)
        assert window.end.utcoffset() == timedelta(hours=-5)
        assert window.start.time() == time(0, 0)
        assert window.end.time() == time(23, 59, 59, 999000)
        elapsed = window.end.astimezone(timezone.utc) - window.start.astimezone(timezone.utc)
        assert elapsed == timedelta(hours=24, minutes=59, seconds=59, milliseconds=999)

    def test_server_local_time_when_zone_unset(self):
        """TEST 5: Without a zone the window is an aware local-time day"""
        window = compute_scan_window(datetime(2026, 10, 19, 12, 0))

        assert window.start.tzinfo is not None
        assert window.end.tzinfo is not None
        assert window.start.date() == date(2026, 10, 20)
        assert window.start.time() == time(0, 0)
        assert window.end.time() == time(23, 59, 59, 999000)


class TestScanWindowContains:

    def test_bounds_are_inclusive(self, scan_now):
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        assert window.contains(window.start)
        assert window.contains(window.end)
        assert window.contains(window.start + timedelta(hours=12))

    def test_outside_moments_are_excluded(self):
        window = ScanWindow(
            start=datetime(2026, 10, 20, tzinfo=HCM),
            end=datetime(2026, 10, 20, 23, 59, 59, 999000, tzinfo=HCM)
        )

        assert not window.contains(window.start - timedelta(milliseconds=1))
        assert not window.contains(datetime(2026, 10, 21, tzinfo=HCM))

"""
TEST FILE: test_expiry_scanner.py
Testing: scan_expiring_items() and to_outcome() from expiry_scanner.py
"""

from expiry_notifier.models.records import Accepted, Skipped, SkipReason
from expiry_notifier.services.expiry_scanner import DEFAULT_ITEM_NAME, scan_expiring_items, to_outcome
from expiry_notifier.services.expiry_window import compute_scan_window
from expiry_notifier.services.record_store import StoreRecord


class TestScanExpiringItems:

    def test_queries_expiry_field_with_window_bounds(self, store_factory, scan_now):
        """TEST 1: Store is queried across all groups with the inclusive window"""
        # Arrange
        store = store_factory([])
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        # Act
        scan_expiring_items(store, window)

        # Assert
        store.query_range_all_groups.assert_called_once_with("expiry_date", window.start, window.end)

    def test_no_records_returns_empty_list(self, empty_store, scan_now):
        """TEST 2: Nothing expiring is an empty result, not an error"""
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        outcomes = scan_expiring_items(empty_store, window)

        assert outcomes == []
        empty_store.get_by_key.assert_not_called()

    def test_outcomes_follow_store_order(self, store_factory, make_item, scan_now, tomorrow_noon):
        """TEST 3: One outcome per record, in the order the store returned them"""
        store = store_factory([
            make_item("i1", "Milk", "A", tomorrow_noon),
            make_item("i2", "Eggs", None, tomorrow_noon),
            make_item("i3", "Bread", "B", tomorrow_noon),
        ])
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        outcomes = scan_expiring_items(store, window)

        assert [type(o) for o in outcomes] == [Accepted, Skipped, Accepted]
        assert outcomes[0].item.name == "Milk"
        assert outcomes[0].item.expiry_date == tomorrow_noon
        assert outcomes[1] == Skipped(record_id="i2", reason=SkipReason.MISSING_HOUSEHOLD_ID)
        assert outcomes[2].item.household_id == "B"

    def test_custom_expiry_field(self, store_factory, scan_now):
        store = store_factory([])
        window = compute_scan_window(scan_now, "Asia/Ho_Chi_Minh")

        scan_expiring_items(store, window, expiry_field="best_before")

        store.query_range_all_groups.assert_called_once_with("best_before", window.start, window.end)


class TestToOutcome:

    def test_missing_household_key_is_skipped(self):
        record = StoreRecord(id="x1", data={"name": "Cheese"})

        assert to_outcome(record) == Skipped(record_id="x1", reason=SkipReason.MISSING_HOUSEHOLD_ID)

    def test_blank_household_id_is_skipped(self, make_item):
        assert isinstance(to_outcome(make_item("x2", "Cheese", "")), Skipped)
        assert isinstance(to_outcome(make_item("x3", "Cheese", "   ")), Skipped)

    def test_missing_name_uses_default(self, make_item):
        outcome = to_outcome(make_item("x4", None, "A"))

        assert isinstance(outcome, Accepted)
        assert outcome.item.name == DEFAULT_ITEM_NAME

    def test_household_id_is_normalized_to_string(self, make_item):
        outcome = to_outcome(make_item("x5", "Yogurt", 42))

        assert outcome.item.household_id == "42"

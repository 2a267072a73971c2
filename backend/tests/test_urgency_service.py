"""Tests for days-left, progress and list ordering."""

from datetime import date, datetime

from varisankya.services.urgency_service import (
    NO_DUE_DATE_SORT_DAYS,
    compute_urgency,
    days_left_for_sort,
    days_until,
    sort_subscriptions,
)

from conftest import make_subscription

TODAY = date(2024, 6, 1)


class TestComputeUrgency:
    """Test the urgency ramp over the 30-day horizon."""

    def test_due_today(self):
        """Due today should be fully urgent."""
        urgency = compute_urgency(date(2024, 6, 1), TODAY)
        assert urgency.days_left_raw == 0
        assert urgency.days_left == 0
        assert urgency.progress == 100
        assert urgency.is_urgent is True

    def test_thirty_days_out(self):
        """30 days out should have no progress."""
        urgency = compute_urgency(date(2024, 7, 1), TODAY)
        assert urgency.days_left_raw == 30
        assert urgency.progress == 0
        assert urgency.is_urgent is False

    def test_beyond_horizon(self):
        """More than 30 days out should stay at zero progress."""
        urgency = compute_urgency(date(2024, 9, 1), TODAY)
        assert urgency.progress == 0
        assert urgency.days_left == 92

    def test_nine_days_is_boundary(self):
        """9 days out is exactly 70% and not yet urgent."""
        urgency = compute_urgency(date(2024, 6, 10), TODAY)
        assert urgency.progress == 70
        assert urgency.is_urgent is False

    def test_eight_days_is_urgent(self):
        urgency = compute_urgency(date(2024, 6, 9), TODAY)
        assert urgency.is_urgent is True

    def test_overdue(self):
        """Overdue collapses to 0 days left but keeps the raw value."""
        urgency = compute_urgency(date(2024, 5, 28), TODAY)
        assert urgency.days_left_raw == -4
        assert urgency.days_left == 0
        assert urgency.progress == 100
        assert urgency.is_urgent is True

    def test_no_due_date(self):
        urgency = compute_urgency(None, TODAY)
        assert urgency.progress == 0
        assert urgency.label == "No due date set"
        assert urgency.is_urgent is False
        assert urgency.has_due_date is False

    def test_label(self):
        urgency = compute_urgency(date(2024, 6, 6), TODAY)
        assert urgency.label == "5 days left (Jun 6)"

    def test_time_of_day_ignored(self):
        """Datetimes are compared as calendar dates."""
        assert days_until(datetime(2024, 6, 2, 0, 5), datetime(2024, 6, 1, 23, 55)) == 1


class TestSorting:
    """Test list ordering."""

    def test_undated_sorts_last(self):
        assert days_left_for_sort(None, TODAY) == NO_DUE_DATE_SORT_DAYS

    def test_sort_by_days_left(self):
        later = make_subscription(name="Later", next_due_date=date(2024, 6, 20))
        sooner = make_subscription(name="Sooner", next_due_date=date(2024, 6, 3))
        undated = make_subscription(name="Undated", next_due_date=None)
        overdue = make_subscription(name="Overdue", next_due_date=date(2024, 5, 30))

        result = sort_subscriptions([undated, later, sooner, overdue], TODAY)
        assert [s.name for s in result] == ["Overdue", "Sooner", "Later", "Undated"]

    def test_inactive_sorts_after_active(self):
        stopped = make_subscription(name="Stopped", next_due_date=date(2024, 6, 2), active=False)
        undated = make_subscription(name="Undated", next_due_date=None)
        dated = make_subscription(name="Dated", next_due_date=date(2024, 6, 25))

        result = sort_subscriptions([stopped, undated, dated], TODAY)
        assert [s.name for s in result] == ["Dated", "Undated", "Stopped"]

    def test_sort_ignoring_active(self):
        stopped = make_subscription(name="Stopped", next_due_date=date(2024, 6, 2), active=False)
        dated = make_subscription(name="Dated", next_due_date=date(2024, 6, 25))

        result = sort_subscriptions([dated, stopped], TODAY, use_active=False)
        assert [s.name for s in result] == ["Stopped", "Dated"]

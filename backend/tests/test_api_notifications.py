"""Tests for the notification schedule endpoint."""

from datetime import date

from varisankya.services.notification_service import notification_id

from conftest import make_subscription


class TestNotificationScheduleAPI:
    """Test the derived schedule endpoint."""

    def test_empty(self, client):
        response = client.get("/api/v1/notifications/schedule", params={"now": "2024-06-01T12:00:00"})
        assert response.status_code == 200
        data = response.json()
        assert data["notifications"] == []
        assert data["total"] == 0

    def test_schedule(self, client, db_session, sample_subscription, undated_subscription):
        """Only active, dated subscriptions appear."""
        db_session.add(make_subscription(name="Stopped", next_due_date=date(2024, 6, 3), active=False))
        db_session.commit()

        response = client.get("/api/v1/notifications/schedule", params={"now": "2024-06-01T12:00:00"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1

        notification = data["notifications"][0]
        assert notification["id"] == notification_id(f"{sample_subscription.id}-future")
        assert notification["fire_at"] == "2024-06-02T09:00:00"
        assert notification["body"] == "Netflix is due in 8 days (USD 15.99)"
        assert notification["channel_id"] == "due_subscriptions"
        assert notification["subscription_id"] == sample_subscription.id

    def test_same_ids_on_repeat(self, client, sample_subscription):
        params = {"now": "2024-06-05T08:00:00"}
        first = client.get("/api/v1/notifications/schedule", params=params).json()
        second = client.get("/api/v1/notifications/schedule", params=params).json()
        assert [n["id"] for n in first["notifications"]] == [n["id"] for n in second["notifications"]]
        assert first["total"] == 1

"""Tests for AI insight and analytics endpoints."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from varisankya.config import settings
from varisankya.models.insight_cache import InsightCache
from varisankya.services import insight_service

from conftest import make_subscription


class FakeAIClient:
    provider = "fake"

    def __init__(self, result=None, error=None, configured=True):
        self.result = result or {"summary": "Streaming service", "alternatives": ["Hulu"]}
        self.error = error
        self.configured = configured
        self.calls = []

    def is_configured(self):
        return self.configured

    async def complete_json(self, system_prompt, user_prompt, **kwargs):
        self.calls.append(user_prompt)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def fake_ai(monkeypatch):
    fake = FakeAIClient()
    monkeypatch.setattr(insight_service, "get_ai_client", lambda: fake)
    return fake


class TestInsightsAPI:
    """Test insight generation and caching."""

    def test_generates_then_caches(self, client, fake_ai):
        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.status_code == 200
        assert response.json() == {"insight": fake_ai.result, "cached": False}

        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.json()["cached"] is True
        assert len(fake_ai.calls) == 1

    def test_expired_cache_regenerates(self, client, db_session, fake_ai):
        """A cached insight older than the TTL is generated again."""
        client.post("/api/v1/insights", json={"subscription_name": "Netflix"})

        row = db_session.query(InsightCache).filter(InsightCache.subscription_name == "Netflix").one()
        row.created_at = datetime.utcnow() - timedelta(hours=2)
        db_session.commit()

        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.json()["cached"] is False
        assert len(fake_ai.calls) == 2
        assert db_session.query(InsightCache).count() == 1

    def test_location_in_prompt(self, client, fake_ai):
        client.post("/api/v1/insights", json={
            "subscription_name": "Netflix",
            "location": {"country": "India"},
        })
        assert "User Location: India" in fake_ai.calls[0]

    def test_default_location(self, client, fake_ai):
        client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert "United States (Default)" in fake_ai.calls[0]

    def test_clear_cache(self, client, fake_ai):
        client.post("/api/v1/insights", json={"subscription_name": "Netflix"})

        response = client.delete("/api/v1/insights", params={"subscription_name": "Netflix"})
        assert response.json() == {"cleared": True}

        client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert len(fake_ai.calls) == 2

    def test_clear_missing(self, client):
        response = client.delete("/api/v1/insights", params={"subscription_name": "Nothing"})
        assert response.json() == {"cleared": False}

    def test_llm_failure(self, client, fake_ai):
        fake_ai.error = RuntimeError("rate limited")
        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.status_code == 502

    def test_not_configured(self, client, fake_ai):
        fake_ai.configured = False
        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.status_code == 503

    def test_disabled(self, client, fake_ai, monkeypatch):
        monkeypatch.setattr(settings, "ai_insights_enabled", False)
        response = client.post("/api/v1/insights", json={"subscription_name": "Netflix"})
        assert response.status_code == 503
        assert fake_ai.calls == []


class TestStoreInsight:
    """Test cache upserts."""

    def test_overwrites_existing_row(self, db_session):
        insight_service.store_insight(db_session, "Netflix", {"v": 1})
        insight_service.store_insight(db_session, "Netflix", {"v": 2})

        rows = db_session.query(InsightCache).all()
        assert len(rows) == 1
        assert rows[0].data == {"v": 2}

    def test_lost_insert_race_updates_winner(self, db_session, monkeypatch):
        """If another request inserted the name first, its row is overwritten."""
        insight_service.store_insight(db_session, "Netflix", {"v": 1})

        real_lookup = insight_service._cache_row
        lookups = []

        def lookup_missing_first(db, name):
            lookups.append(name)
            return None if len(lookups) == 1 else real_lookup(db, name)

        monkeypatch.setattr(insight_service, "_cache_row", lookup_missing_first)
        entry = insight_service.store_insight(db_session, "Netflix", {"v": 2})

        assert entry.data == {"v": 2}
        rows = db_session.query(InsightCache).all()
        assert len(rows) == 1
        assert rows[0].data == {"v": 2}


class TestAnalyticsAPI:
    """Test the spending summary endpoint."""

    def test_summary(self, client, db_session):
        db_session.add(make_subscription(name="Netflix", cost=Decimal("15.99")))
        db_session.add(make_subscription(name="Backup", cost=Decimal("120.00"), billing_cycle="yearly"))
        db_session.add(make_subscription(name="Old", cost=Decimal("50.00"), active=False))
        db_session.commit()

        response = client.get("/api/v1/analytics")
        assert response.status_code == 200
        data = response.json()
        assert [s["name"] for s in data["subscriptions"]] == ["Netflix", "Backup"]
        assert Decimal(data["monthly_totals"]["USD"]) == Decimal("25.99")
        assert data["cumulative"]["USD"][-1] == {"month": "Dec", "amount": 312}

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from zawadii_api.core.settings import settings
from zawadii_api.observability.loyalty import LoyaltyObservabilityStore


def test_store_tracks_counters_and_resets() -> None:
    store = LoyaltyObservabilityStore()
    store.record_activity(points_awarded=3, walk_in=False)
    store.record_activity(points_awarded=-1, walk_in=True)
    store.record_sms("bulk_message", success=False)
    store.record_reward_event("codes_generated", 10)

    snapshot = store.snapshot().as_dict()
    assert snapshot["activities"] == {"recorded": 2, "points_awarded": 3, "app_customer": 1, "walk_in": 1}
    assert snapshot["messaging"] == {"failed": 1, "bulk_message:failed": 1}
    assert snapshot["rewards"] == {"codes_generated": 10}

    store.reset()
    assert store.snapshot().as_dict() == {"activities": {}, "messaging": {}, "rewards": {}}


@pytest.mark.asyncio
async def test_loyalty_snapshot_endpoint(app_with_db, business, monkeypatch) -> None:
    app, _ = app_with_db
    monkeypatch.setattr(settings, "operator_api_key", "snapshot-key")
    headers = {"X-API-Key": "snapshot-key"}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        denied = await client.get("/api/v1/observability/loyalty")
        await client.post(
            f"/api/v1/businesses/{business.id}/activities",
            json={"phoneNumber": "0754000111", "name": "Neema", "amount": "10000"},
            headers=headers,
        )
        snapshot = await client.get("/api/v1/observability/loyalty", headers=headers)

    assert denied.status_code == 401
    assert snapshot.json()["activities"]["recorded"] == 1
    assert snapshot.json()["activities"]["walk_in"] == 1

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.mark.asyncio
async def test_dashboard_and_reward_report(app_with_db, business) -> None:
    app, _ = app_with_db
    base = f"/api/v1/businesses/{business.id}"

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        await client.post(f"{base}/activities", json={"phoneNumber": "0754000111", "name": "Neema", "amount": "8000"})
        reward = (
            await client.post(f"{base}/rewards", json={"title": "Free Soda", "pointsRequired": 2, "cost": 1000})
        ).json()
        await client.post(f"{base}/rewards/{reward['id']}/codes", json={"quantity": 4})

        dashboard = await client.get(f"{base}/reports/dashboard", params={"timeframe": "Day"})
        rewards = await client.get(f"{base}/reports/rewards")
        invalid = await client.get(f"{base}/reports/dashboard", params={"timeframe": "Year"})

    payload = dashboard.json()
    assert payload["timeframe"] == "Day"
    assert len(payload["revenue"]) == 8
    assert sum(point["value"] for point in payload["revenue"]) == 8000.0
    assert payload["metrics"]["totalCustomers"] == 1
    assert payload["rewards"]["totalCodes"] == 4
    assert payload["recentRewards"] == []

    assert rewards.json()["rewardsBudget"] == 4000.0
    assert rewards.json()["mostPopularReward"] == "None"
    assert invalid.status_code == 422

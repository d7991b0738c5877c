from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient

from zawadii_api.core.settings import settings
from zawadii_api.models import RewardCode, RewardCodeStatus


async def _create_reward(client, business_id, title="Free Chapati Meal"):
    response = await client.post(
        f"/api/v1/businesses/{business_id}/rewards",
        json={"title": title, "pointsRequired": 5, "cost": 3500},
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_reward_catalog_endpoints(app_with_db, business) -> None:
    app, _ = app_with_db
    base = f"/api/v1/businesses/{business.id}/rewards"

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        terms = await client.get("/api/v1/rewards/default-terms")
        invalid = await client.post(base, json={"title": "", "pointsRequired": 0})
        reward = await _create_reward(client, business.id)
        patched = await client.patch(f"{base}/{reward['id']}", json={"pointsRequired": 8})
        deactivated = await client.post(f"{base}/{reward['id']}/deactivate")
        listed = await client.get(base)
        deleted = await client.delete(f"{base}/{reward['id']}")

    assert "one-time use" in terms.json()["terms"]
    assert invalid.status_code == 422
    assert reward["usesDefaultTerms"] is True
    assert patched.json()["pointsRequired"] == 8
    assert deactivated.json()["isActive"] is False
    assert listed.json()[0]["availableCodes"] == 0
    assert deleted.json() == {"rewardId": reward["id"], "deletedCodes": 0}


@pytest.mark.asyncio
async def test_reward_code_endpoints(app_with_db, business, monkeypatch) -> None:
    app, _ = app_with_db
    monkeypatch.setattr(settings, "admin_api_key", "admin-key")
    base = f"/api/v1/businesses/{business.id}"

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        reward = await _create_reward(client, business.id)
        preview = await client.get(f"{base}/rewards/{reward['id']}/codes/preview")
        generated = await client.post(
            f"{base}/rewards/{reward['id']}/codes",
            json={"quantity": 3, "issueDate": "2024-03-07"},
        )
        too_many = await client.post(f"{base}/rewards/{reward['id']}/codes", json={"quantity": 500})
        codes = generated.json()["codes"]

        single = await client.delete(f"{base}/codes/{codes[0]['id']}")
        listing = await client.get(f"{base}/codes", params={"status": "unused"})
        bad_admin = await client.post(
            f"{base}/codes/bulk-delete",
            json={"codeIds": [codes[1]["id"]]},
            headers={"X-Admin-Key": "wrong"},
        )
        bulk = await client.post(f"{base}/codes/bulk-delete", json={"codeIds": [codes[1]["id"]]})
        redeem_unissued = await client.post(f"{base}/codes/redeem", json={"code": codes[2]["code"]})

    assert preview.json()["code"].startswith("CHA")
    assert generated.status_code == 201
    assert generated.json()["count"] == 3
    assert [code["code"] for code in codes] == ["CHA0307001", "CHA0307002", "CHA0307003"]
    assert codes[0]["rewardTitle"] == "Free Chapati Meal"
    assert too_many.status_code == 422

    assert single.status_code == 204
    assert listing.json()["counts"]["unused"] == 2
    assert len(listing.json()["items"]) == 2
    assert bad_admin.status_code == 403
    assert bulk.json() == {"deleted": 1, "unused": 1, "bought": 0}
    assert redeem_unissued.status_code == 409


@pytest.mark.asyncio
async def test_deleting_reward_with_bought_codes_returns_alternatives(app_with_db, business) -> None:
    app, session_factory = app_with_db
    base = f"/api/v1/businesses/{business.id}"

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        reward = await _create_reward(client, business.id)
        generated = await client.post(f"{base}/rewards/{reward['id']}/codes", json={"quantity": 2})
        code_id = generated.json()["codes"][0]["id"]

        async with session_factory() as session:
            code = await session.get(RewardCode, UUID(code_id))
            code.status = RewardCodeStatus.BOUGHT
            await session.commit()

        refused = await client.delete(f"{base}/rewards/{reward['id']}")
        blocked_bulk = await client.post(f"{base}/codes/bulk-delete", json={"codeIds": [code_id]})

    assert refused.status_code == 409
    payload = refused.json()
    assert payload["usedCodesCount"] == 1
    assert payload["alternatives"] == ["deactivate_reward", "delete_unused_codes"]
    assert blocked_bulk.status_code == 403

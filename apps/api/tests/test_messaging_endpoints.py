import pytest
from httpx import ASGITransport, AsyncClient

from zawadii_api.core.errors import SmsDeliveryError
from zawadii_api.models import Customer


@pytest.mark.asyncio
async def test_customer_message_with_attached_reward(app_with_db, business, sms_gateway) -> None:
    app, session_factory = app_with_db
    async with session_factory() as session:
        session.add(Customer(full_name="Asha Mwinyi", phone_number="+255712345678"))
        await session.commit()

    base = f"/api/v1/businesses/{business.id}"
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        reward = (
            await client.post(f"{base}/rewards", json={"title": "Free Soda", "pointsRequired": 2})
        ).json()
        await client.post(f"{base}/rewards/{reward['id']}/codes", json={"quantity": 1})

        attachable = await client.get(f"{base}/messages/rewards")
        eligibility = await client.get(f"{base}/messages/eligibility", params={"phone": "0712345678"})
        sent = await client.post(
            f"{base}/messages",
            json={"phoneNumber": "0712345678", "message": "Karibu tena!", "rewardId": reward["id"]},
        )
        exhausted = await client.get(f"{base}/messages/rewards")
        codes = await client.get(f"{base}/codes", params={"status": "bought"})
        detail = await client.get(f"{base}/customers/0712345678")

    assert [row["title"] for row in attachable.json()] == ["Free Soda"]
    assert eligibility.json() == {"phoneNumber": "+255712345678", "eligible": True}

    assert sent.status_code == 200
    payload = sent.json()
    assert payload["rewardCode"] == attachable.json()[0]["code"]
    assert payload["delivery"]["sentCount"] == 1
    assert sms_gateway.sent[0].message.startswith("Karibu tena! - Mama Lishe Kitchen")

    assert exhausted.json() == []
    assert codes.json()["items"][0]["customerName"] == "Asha Mwinyi"
    assert detail.status_code == 404


@pytest.mark.asyncio
async def test_bulk_message_and_provider_failure(app_with_db, business, sms_gateway) -> None:
    app, _ = app_with_db
    base = f"/api/v1/businesses/{business.id}/messages"

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        bulk = await client.post(
            f"{base}/bulk", json={"phoneNumbers": ["0712345678", "0754000111"], "message": "Sale today!"}
        )
        sms_gateway.fail_with = SmsDeliveryError("Insufficient balance", provider_code=100)
        failed = await client.post(f"{base}/bulk", json={"phoneNumbers": ["0712345678"], "message": "Again"})

    assert bulk.json()["phoneNumbers"] == ["+255712345678", "+255754000111"]
    assert failed.status_code == 502
    assert failed.json() == {"detail": "Insufficient balance"}


@pytest.mark.asyncio
async def test_raw_sms_endpoint(app_with_db, sms_gateway) -> None:
    app, _ = app_with_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        empty = await client.post("/api/v1/sms/send", json={"recipients": [], "message": "Hello"})
        sent = await client.post(
            "/api/v1/sms/send",
            json={"recipients": [{"phone": "+255712345678"}], "message": "Hello"},
        )
        counters = await client.get("/api/v1/observability/loyalty")

    assert empty.status_code == 400
    assert empty.json() == {"detail": "Recipients array is required and cannot be empty"}
    assert sent.json()["success"] is True
    assert sent.json()["sentCount"] == 1
    assert counters.json()["messaging"]["raw:sent"] == 1

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from zawadii_api.core.errors import NotFoundError
from zawadii_api.models import Customer, CustomerReward, CustomerRewardStatus, Reward
from zawadii_api.services.activities import ActivityService
from zawadii_api.services.customers import (
    CustomerDirectoryService,
    CustomerFilter,
    compute_customer_metrics,
    query_customers,
    secondary_status,
    unify_customers,
    visit_frequency_display,
)

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def _interaction(phone, amount, *, days_ago=1, customer_id=None, name="Walk-in", points=0):
    return SimpleNamespace(
        phone_number=phone,
        amount_spent=Decimal(amount),
        points_awarded=points,
        customer_id=customer_id,
        name=name,
        created_at=NOW - timedelta(days=days_ago),
    )


def _customer(phone, name, *, days_ago=100):
    return SimpleNamespace(
        id=uuid4(),
        phone_number=phone,
        full_name=name,
        nickname=None,
        email=None,
        created_at=NOW - timedelta(days=days_ago),
    )


def _points(phone, points, spent, *, customer_id=None):
    return SimpleNamespace(
        phone_number=phone,
        customer_id=customer_id,
        points=points,
        total_amount_spent=Decimal(spent),
        created_at=NOW - timedelta(days=5),
    )


def test_secondary_status_windows() -> None:
    assert secondary_status(NOW - timedelta(days=10), NOW) == "Active"
    assert secondary_status(NOW - timedelta(days=60), NOW) == "At Risk"
    assert secondary_status(NOW - timedelta(days=200), NOW) == "Lapsed"
    assert secondary_status(None, NOW) == "Lapsed"


def test_unify_merges_sources_by_phone() -> None:
    asha = _customer("+255712345678", "Asha Mwinyi")
    idle = _customer("+255799999999", "No Visits")
    interactions = [
        _interaction("+255712345678", "5000", customer_id=asha.id, days_ago=2, points=1),
        _interaction("+255712345678", "7000", customer_id=asha.id, days_ago=40, points=1),
        _interaction("+255754000111", "3000", name="Neema", days_ago=100),
        _interaction("+255754000111", "2000", name="Neema B", days_ago=50),
    ]
    balances = [
        _points("+255712345678", 2, "12000", customer_id=asha.id),
        _points("+255622334455", 7, "30000"),
    ]

    customers = {row.phone_number: row for row in unify_customers([asha, idle], interactions, balances, now=NOW)}

    assert set(customers) == {"+255712345678", "+255754000111", "+255622334455"}

    app = customers["+255712345678"]
    assert app.source == "app" and app.has_app
    assert app.id == str(asha.id)
    assert app.total_visits == 2
    assert app.points == 2
    assert app.total_spend == Decimal("12000")
    assert app.secondary_status == "Active"

    walk_in = customers["+255754000111"]
    assert walk_in.source == "sms"
    assert walk_in.id == "sms_255754000111"
    assert walk_in.name == "Neema B"
    assert walk_in.total_spend == Decimal("5000")
    assert walk_in.secondary_status == "At Risk"
    assert walk_in.created_at == NOW - timedelta(days=100)

    points_only = customers["+255622334455"]
    assert points_only.source == "points"
    assert points_only.id == "points_255622334455"
    assert points_only.points == 7
    assert points_only.last_visit is None
    assert points_only.last_visit_label == "Never"


def test_metrics_and_frequency_display() -> None:
    interactions = [_interaction("+255754000111", "3000"), _interaction("+255754000111", "5000")]
    customers = unify_customers([], interactions, [], now=NOW)

    metrics = compute_customer_metrics(customers, interactions, now=NOW)

    assert metrics.total_customers == 1
    assert metrics.new_customers_this_month == 1
    assert metrics.avg_spend_per_visit == Decimal("4000")
    assert metrics.visit_frequency_display == "2.0 per month"
    assert visit_frequency_display(Decimal("0.5")) == "6.0 per year"


def _directory():
    interactions = [
        _interaction("+255711111111", "50000", name="Baraka", days_ago=3),
        _interaction("+255722222222", "2000", name="Asha", days_ago=120),
        _interaction("+255733333333", "15000", name="Juma", days_ago=45),
        _interaction("+255733333333", "15000", name="Juma", days_ago=10),
    ]
    return unify_customers([], interactions, [], now=NOW)


def test_query_customers_search_filter_sort() -> None:
    customers = _directory()

    assert [row.name for row in query_customers(customers, search="ASH").items] == ["Asha"]
    assert [row.name for row in query_customers(customers, search="7333").items] == ["Juma"]

    big_spenders = query_customers(
        customers,
        filters=[CustomerFilter("Total Spend", "greater", "10000")],
        sort_field="totalSpend",
        sort_direction="desc",
    )
    assert [row.name for row in big_spenders.items] == ["Baraka", "Juma"]

    recent = query_customers(customers, filters=[CustomerFilter("Last Visit Date", "greater", "2024-04-01")])
    assert {row.name for row in recent.items} == {"Baraka", "Juma"}

    lapsed = query_customers(customers, filters=[CustomerFilter("Secondary Status", "greater", "lapsed")])
    assert [row.name for row in lapsed.items] == ["Asha"]

    ignored = query_customers(customers, filters=[CustomerFilter("Points", "less", "not-a-number")])
    assert ignored.total == 3


def test_query_customers_paginates() -> None:
    page = query_customers(_directory(), sort_field="name", page=2, page_size=2)

    assert page.total == 3
    assert page.total_pages == 2
    assert [row.name for row in page.items] == ["Juma"]


@pytest.mark.asyncio
async def test_directory_service_loads_business_customers(session_factory, business) -> None:
    async with session_factory() as session:
        customer = Customer(full_name="Asha Mwinyi", phone_number="+255712345678")
        stranger = Customer(full_name="Elsewhere", phone_number="+255788888888")
        session.add_all([customer, stranger])
        await session.commit()

        activities = ActivityService(session)
        await activities.record_activity(business, phone_number="0712345678", name="Asha", amount="10000")
        await activities.record_activity(business, phone_number="0754000111", name="Neema", amount="4000")

        reward = Reward(business_id=business.id, title="Free Soda", points_required=2)
        session.add(reward)
        await session.flush()
        session.add(
            CustomerReward(
                business_id=business.id,
                customer_id=customer.id,
                reward_id=reward.id,
                status=CustomerRewardStatus.CLAIMED,
            )
        )
        await session.commit()

        service = CustomerDirectoryService(session)
        directory = await service.load(business)
        detail = await service.customer_detail(business, "0712345678")

        with pytest.raises(NotFoundError):
            await service.customer_detail(business, "+255788888888")

    phones = {row.phone_number for row in directory.customers}
    assert phones == {"+255712345678", "+255754000111"}
    assert directory.metrics.total_customers == 2
    assert detail.customer.has_app
    assert detail.customer.name == "Asha Mwinyi"
    assert [row.reward.title for row in detail.rewards] == ["Free Soda"]


def test_customer_without_visits_counts_as_oldest() -> None:
    interactions = [
        _interaction("+255711111111", "50000", name="Baraka", days_ago=3),
        _interaction("+255722222222", "2000", name="Asha", days_ago=120),
    ]
    customers = unify_customers([], interactions, [_points("+255622334455", 7, "0")], now=NOW)

    before = query_customers(customers, filters=[CustomerFilter("Last Visit Date", "less", "2024-04-01")])
    assert {row.phone_number for row in before.items} == {"+255722222222", "+255622334455"}

    after = query_customers(customers, filters=[CustomerFilter("Last Visit Date", "greater", "2024-04-01")])
    assert [row.phone_number for row in after.items] == ["+255711111111"]

    oldest_first = query_customers(customers, sort_field="lastVisitDate", sort_direction="asc")
    assert [row.phone_number for row in oldest_first.items] == ["+255622334455", "+255722222222", "+255711111111"]

    newest_first = query_customers(customers, sort_field="lastVisitDate", sort_direction="desc")
    assert [row.phone_number for row in newest_first.items] == ["+255711111111", "+255722222222", "+255622334455"]


def test_visit_frequency_rounds_half_up() -> None:
    assert visit_frequency_display(Decimal(5) / 4) == "1.3 per month"
    assert visit_frequency_display(Decimal("1.05")) == "1.1 per month"
    assert visit_frequency_display(Decimal("0.0375")) == "0.5 per year"

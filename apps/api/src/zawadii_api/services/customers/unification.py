"""Merge app customers, walk-in purchases and point balances into one customer list.

A business sees three kinds of rows for the same person: an app account, purchases
recorded against a bare phone number, and a running points balance. The phone
number is the join key; the first source to claim a phone wins.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Literal, Sequence
from uuid import UUID

from zawadii_api.core.clock import ensure_aware, one_month_before
from zawadii_api.models import Customer, CustomerInteraction, CustomerPoints

CustomerSource = Literal["app", "sms", "points"]
SecondaryStatus = Literal["Active", "At Risk", "Lapsed"]

ACTIVE_WINDOW = timedelta(days=30)
AT_RISK_WINDOW = timedelta(days=90)


@dataclass
class UnifiedCustomer:
    id: str
    name: str
    phone_number: str
    total_spend: Decimal
    total_visits: int
    points: int
    source: CustomerSource
    has_app: bool
    last_visit: datetime | None = None
    created_at: datetime | None = None
    customer_id: UUID | None = None
    email: str | None = None
    tag: str = ""
    rpi: int = 0
    lei: int = 0
    spending_score: int = 0
    secondary_status: SecondaryStatus = "Lapsed"
    interactions: list[CustomerInteraction] = field(default_factory=list, repr=False)

    @property
    def last_visit_label(self) -> str:
        return self.last_visit.date().isoformat() if self.last_visit else "Never"


@dataclass
class CustomerMetrics:
    total_customers: int
    new_customers_this_month: int
    avg_spend_per_visit: Decimal
    visit_frequency: Decimal

    @property
    def visit_frequency_display(self) -> str:
        return visit_frequency_display(self.visit_frequency)


def secondary_status(last_visit: datetime | None, now: datetime) -> SecondaryStatus:
    if last_visit is None:
        return "Lapsed"
    age = ensure_aware(now) - ensure_aware(last_visit)
    if age <= ACTIVE_WINDOW:
        return "Active"
    if age <= AT_RISK_WINDOW:
        return "At Risk"
    return "Lapsed"


def _digits(phone: str) -> str:
    return phone.lstrip("+")


def _spend(rows: Iterable[CustomerInteraction]) -> Decimal:
    return sum((Decimal(row.amount_spent or 0) for row in rows), Decimal("0"))


def _points(rows: Iterable[CustomerInteraction]) -> int:
    return sum(int(row.points_awarded or 0) for row in rows)


def _latest(rows: Sequence[CustomerInteraction]) -> CustomerInteraction | None:
    dated = [row for row in rows if row.created_at is not None]
    return max(dated, key=lambda row: ensure_aware(row.created_at)) if dated else None


def _earliest(rows: Sequence[CustomerInteraction]) -> CustomerInteraction | None:
    dated = [row for row in rows if row.created_at is not None]
    return min(dated, key=lambda row: ensure_aware(row.created_at)) if dated else None


def _visit_time(row: CustomerInteraction | None) -> datetime | None:
    return ensure_aware(row.created_at) if row is not None and row.created_at is not None else None


def unify_customers(
    customers: Iterable[Customer],
    interactions: Iterable[CustomerInteraction],
    points_rows: Iterable[CustomerPoints],
    *,
    now: datetime,
) -> list[UnifiedCustomer]:
    """Build the business customer list; ``interactions`` and ``points_rows`` must be scoped to one business."""

    interactions = list(interactions)
    points_rows = list(points_rows)

    by_customer: dict[UUID, list[CustomerInteraction]] = defaultdict(list)
    walk_ins: dict[str, list[CustomerInteraction]] = defaultdict(list)
    by_phone: dict[str, list[CustomerInteraction]] = defaultdict(list)
    for row in interactions:
        if row.phone_number:
            by_phone[row.phone_number].append(row)
        if row.customer_id is not None:
            by_customer[row.customer_id].append(row)
        elif row.phone_number:
            walk_ins[row.phone_number].append(row)

    points_by_customer = {row.customer_id: row for row in points_rows if row.customer_id is not None}

    unified: dict[str, UnifiedCustomer] = {}

    for customer in customers:
        if not customer.phone_number or customer.phone_number in unified:
            continue
        history = by_customer.get(customer.id, [])
        balance = points_by_customer.get(customer.id)
        if not history and balance is None:
            continue
        last = _visit_time(_latest(history))
        unified[customer.phone_number] = UnifiedCustomer(
            id=str(customer.id),
            customer_id=customer.id,
            name=customer.full_name or customer.nickname or "Unknown",
            phone_number=customer.phone_number,
            email=customer.email,
            total_spend=Decimal(balance.total_amount_spent or 0) if balance else _spend(history),
            total_visits=len(history),
            points=int(balance.points or 0) if balance else _points(history),
            last_visit=last,
            created_at=ensure_aware(customer.created_at) if customer.created_at else None,
            source="app",
            has_app=True,
            secondary_status=secondary_status(last, now),
            interactions=history,
        )

    for phone, history in walk_ins.items():
        if phone in unified:
            continue
        latest = _latest(history)
        first = _earliest(history)
        last = _visit_time(latest)
        unified[phone] = UnifiedCustomer(
            id=f"sms_{_digits(phone)}",
            name=(latest.name if latest and latest.name else None) or "Unknown",
            phone_number=phone,
            total_spend=_spend(history),
            total_visits=len(history),
            points=_points(history),
            last_visit=last,
            created_at=_visit_time(first),
            source="sms",
            has_app=False,
            secondary_status=secondary_status(last, now),
            interactions=history,
        )

    for balance in points_rows:
        phone = balance.phone_number
        if not phone or phone in unified:
            continue
        history = by_phone.get(phone, [])
        latest = _latest(history)
        last = _visit_time(latest)
        unified[phone] = UnifiedCustomer(
            id=str(balance.customer_id) if balance.customer_id else f"points_{_digits(phone)}",
            customer_id=balance.customer_id,
            name=(latest.name if latest and latest.name else None) or "Unknown",
            phone_number=phone,
            total_spend=Decimal(balance.total_amount_spent or 0),
            total_visits=len(history),
            points=int(balance.points or 0),
            last_visit=last,
            created_at=ensure_aware(balance.created_at) if balance.created_at else None,
            source="app" if balance.customer_id else "points",
            has_app=balance.customer_id is not None,
            secondary_status=secondary_status(last, now),
            interactions=history,
        )

    return list(unified.values())


def compute_customer_metrics(
    customers: Sequence[UnifiedCustomer],
    interactions: Sequence[CustomerInteraction],
    *,
    now: datetime,
) -> CustomerMetrics:
    cutoff = one_month_before(now)
    new_customers = sum(
        1 for customer in customers if customer.created_at is not None and ensure_aware(customer.created_at) >= cutoff
    )
    total_spend = _spend(interactions)
    avg_spend = total_spend / len(interactions) if interactions else Decimal("0")
    total_visits = sum(customer.total_visits for customer in customers)
    frequency = Decimal(total_visits) / len(customers) if customers else Decimal("0")
    return CustomerMetrics(
        total_customers=len(customers),
        new_customers_this_month=new_customers,
        avg_spend_per_visit=avg_spend,
        visit_frequency=frequency,
    )


def _one_decimal(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def visit_frequency_display(frequency: Decimal | float) -> str:
    value = Decimal(str(frequency))
    if value >= 1:
        return f"{_one_decimal(value)} per month"
    return f"{_one_decimal(value * 12)} per year"

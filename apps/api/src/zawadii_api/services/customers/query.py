"""Search, filter, sort and paginate the unified customer list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Literal, Sequence

from zawadii_api.core.clock import ensure_aware
from zawadii_api.services.customers.unification import UnifiedCustomer

Operator = Literal["greater", "less"]
SortDirection = Literal["asc", "desc"]

DEFAULT_PAGE_SIZE = 10
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Filter labels as shown in the dashboard filter picker.
FILTER_FIELDS: dict[str, str] = {
    "Total Spend": "total_spend",
    "Total Visits": "total_visits",
    "Last Visit Date": "last_visit",
    "Points": "points",
    "Tag": "tag",
    "Secondary Status": "secondary_status",
}

SORT_FIELDS: dict[str, str] = {
    "name": "name",
    "phone": "phone_number",
    "totalSpend": "total_spend",
    "totalVisits": "total_visits",
    "lastVisitDate": "last_visit",
    "points": "points",
    "tag": "tag",
    "rpi": "rpi",
    "lei": "lei",
}

_NUMERIC_FIELDS = {"total_spend", "total_visits", "points", "rpi", "lei"}
_TEXT_MATCH_FIELDS = {"tag", "secondary_status"}


@dataclass(frozen=True)
class CustomerFilter:
    field: str
    operator: Operator
    value: str


@dataclass
class CustomerPage:
    items: list[UnifiedCustomer]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return max(math.ceil(self.total / self.page_size), 1) if self.page_size else 1


def _parse_number(raw: Any) -> Decimal | None:
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def _parse_date(raw: str) -> datetime | None:
    text = (raw or "").strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed_date = date.fromisoformat(text)
        except ValueError:
            return None
        parsed = datetime(parsed_date.year, parsed_date.month, parsed_date.day)
    return ensure_aware(parsed)


def matches_filter(customer: UnifiedCustomer, criterion: CustomerFilter) -> bool:
    """True when ``customer`` passes one filter; unusable filter values pass everyone."""

    attr = FILTER_FIELDS.get(criterion.field, criterion.field)
    value = getattr(customer, attr, None)

    if attr in _TEXT_MATCH_FIELDS:
        if value is None or value == "":
            return False
        return str(value).lower() == criterion.value.strip().lower()

    if attr == "last_visit":
        threshold = _parse_date(criterion.value)
        if threshold is None:
            return True
        if value is None:
            # A customer who never visited is older than any date.
            return criterion.operator == "less"
        visited = ensure_aware(value)
        return visited > threshold if criterion.operator == "greater" else visited < threshold

    threshold_number = _parse_number(criterion.value)
    if threshold_number is None:
        return True
    if value is None:
        return False
    number = Decimal(str(value))
    return number > threshold_number if criterion.operator == "greater" else number < threshold_number


def _matches_search(customer: UnifiedCustomer, term: str) -> bool:
    return term in (customer.name or "").lower() or term in (customer.phone_number or "").lower()


def _sort_key(attr: str) -> Callable[[UnifiedCustomer], Any]:
    if attr in _NUMERIC_FIELDS:
        return lambda customer: Decimal(str(getattr(customer, attr) or 0))
    if attr == "last_visit":
        return lambda customer: ensure_aware(customer.last_visit) if customer.last_visit else _EPOCH
    return lambda customer: str(getattr(customer, attr) or "").lower()


def query_customers(
    customers: Sequence[UnifiedCustomer],
    *,
    search: str | None = None,
    filters: Sequence[CustomerFilter] = (),
    sort_field: str | None = None,
    sort_direction: SortDirection = "asc",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CustomerPage:
    rows = list(customers)

    term = (search or "").strip().lower()
    if term:
        rows = [customer for customer in rows if _matches_search(customer, term)]

    for criterion in filters:
        rows = [customer for customer in rows if matches_filter(customer, criterion)]

    if sort_field:
        attr = SORT_FIELDS.get(sort_field, sort_field)
        rows.sort(key=_sort_key(attr), reverse=sort_direction == "desc")

    page_size = max(page_size, 1)
    page = max(page, 1)
    start = (page - 1) * page_size
    return CustomerPage(items=rows[start:start + page_size], total=len(rows), page=page, page_size=page_size)

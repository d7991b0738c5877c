"""Customer directory exports."""

from .directory import CustomerDetail, CustomerDirectory, CustomerDirectoryService  # noqa: F401
from .query import (  # noqa: F401
    DEFAULT_PAGE_SIZE,
    FILTER_FIELDS,
    SORT_FIELDS,
    CustomerFilter,
    CustomerPage,
    matches_filter,
    query_customers,
)
from .unification import (  # noqa: F401
    CustomerMetrics,
    UnifiedCustomer,
    compute_customer_metrics,
    secondary_status,
    unify_customers,
    visit_frequency_display,
)

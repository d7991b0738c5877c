"""Reporting exports."""

from .dashboard import DashboardReport, ReportService  # noqa: F401
from .revenue import RevenuePoint, Timeframe, revenue_series  # noqa: F401

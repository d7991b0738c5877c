from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from zawadii_api.services.activities import ActivityService
from zawadii_api.services.reporting import ReportService, revenue_series

NOW = datetime(2024, 5, 22, 14, 30, tzinfo=timezone.utc)  # a Wednesday


def _row(amount, when):
    return SimpleNamespace(amount_spent=Decimal(amount), created_at=when)


def test_month_series_covers_trailing_year() -> None:
    rows = [
        _row("1000", datetime(2024, 5, 1, tzinfo=timezone.utc)),
        _row("2500", datetime(2024, 5, 21, tzinfo=timezone.utc)),
        _row("4000", datetime(2023, 6, 3, tzinfo=timezone.utc)),
        _row("9999", datetime(2023, 5, 30, tzinfo=timezone.utc)),
    ]

    series = revenue_series(rows, "Month", now=NOW)

    assert len(series) == 12
    assert series[0].key == "2023-06" and series[0].label == "JUN"
    assert series[0].value == Decimal("4000")
    assert series[-1].key == "2024-05" and series[-1].label == "MAY"
    assert series[-1].value == Decimal("3500")
    assert sum(point.value for point in series) == Decimal("7500")


def test_week_series_labels_weekdays() -> None:
    rows = [_row("700", datetime(2024, 5, 16, 9, tzinfo=timezone.utc)), _row("300", NOW)]

    series = revenue_series(rows, "Week", now=NOW)

    assert [point.label for point in series] == ["THU", "FRI", "SAT", "SUN", "MON", "TUE", "WED"]
    assert series[0].value == Decimal("700")
    assert series[-1].value == Decimal("300")


def test_day_series_groups_three_hour_blocks() -> None:
    rows = [
        _row("100", datetime(2024, 5, 22, 1, tzinfo=timezone.utc)),
        _row("200", datetime(2024, 5, 22, 13, 59, tzinfo=timezone.utc)),
        _row("300", datetime(2024, 5, 21, 13, tzinfo=timezone.utc)),
    ]

    series = {point.key: point.value for point in revenue_series(rows, "Day", now=NOW)}

    assert len(series) == 8
    assert series["00:00"] == Decimal("100")
    assert series["12:00"] == Decimal("200")
    assert sum(series.values()) == Decimal("300")


def test_unknown_timeframe_rejected() -> None:
    with pytest.raises(ValueError):
        revenue_series([], "Year", now=NOW)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_dashboard_report_combines_sections(session_factory, business) -> None:
    async with session_factory() as session:
        await ActivityService(session).record_activity(
            business, phone_number="0754000111", name="Neema", amount="10000"
        )
        report = await ReportService(session).dashboard(business, timeframe="Week")

    assert report.timeframe == "Week"
    assert report.metrics.total_customers == 1
    assert len(report.revenue) == 7
    assert report.revenue[-1].value == Decimal("10000")
    assert report.rewards.total_codes == 0
    assert report.recent_rewards == []

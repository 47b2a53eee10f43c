from datetime import date, datetime, time, timedelta, timezone

import pytest

from kiosk.aggregator import build_report, summarize
from kiosk.schemas import Document, Expense, InventoryItem, Purchase, Sale
from kiosk.timeframe import Timeframe

UTC = timezone.utc


def make_document(**overrides) -> Document:
    fields = dict(
        inventory=[InventoryItem(name="Cheese", quantity=20, cost_per_unit=20)],
        purchases=[
            Purchase(item_name="Cheese", quantity=10, total_cost=1000, timestamp=datetime(2024, 7, 17, 8, tzinfo=UTC)),
        ],
        sales=[
            Sale(item_name="Daily Sale", quantity=1, revenue=5000, timestamp=datetime(2024, 7, 17, 20, tzinfo=UTC)),
        ],
        rent=30000,
        other_expenses=[Expense(name="Utilities", amount=3000)],
    )
    fields.update(overrides)
    return Document(**fields)


def test_all_time_report(now):
    report = build_report(make_document(), Timeframe.ALL, now)
    assert report.total_sales == 5000
    assert report.total_purchases == 1000
    assert report.cogs == 1000
    assert report.gross_profit == 4000
    assert report.rent == 30000
    assert report.other_expenses == 3000
    assert report.net_profit == -29000
    assert report.inventory_value == 400
    assert report.chart_title == "Overall Summary"


@pytest.mark.parametrize("timeframe", list(Timeframe))
def test_profit_identities_hold_for_every_timeframe(timeframe, now):
    document = make_document(
        purchases=[
            Purchase(item_name="Flour", quantity=1, total_cost=120.5, timestamp=datetime(2024, 7, 2, tzinfo=UTC)),
            Purchase(item_name="Sauce", quantity=2, total_cost=80, timestamp=datetime(2024, 7, 16, tzinfo=UTC)),
            Purchase(item_name="Box", quantity=5, total_cost=15),
        ],
        sales=[
            Sale(item_name="Daily Sale", revenue=900, timestamp=datetime(2024, 7, 17, 1, tzinfo=UTC)),
            Sale(item_name="Daily Sale", revenue=333.3, timestamp=datetime(2024, 6, 30, tzinfo=UTC)),
        ],
    )
    report = build_report(document, timeframe, now)
    assert report.gross_profit == report.total_sales - report.total_purchases
    assert report.net_profit == report.gross_profit - report.rent - report.other_expenses
    assert report.cogs == report.total_purchases


def test_fixed_costs_are_prorated(now):
    daily = build_report(make_document(), Timeframe.DAILY, now)
    weekly = build_report(make_document(), "weekly", now)
    monthly = build_report(make_document(), Timeframe.MONTHLY, now)

    assert (daily.rent, daily.other_expenses) == (1000, 100)
    assert (weekly.rent, weekly.other_expenses) == (7500, 750)
    assert (monthly.rent, monthly.other_expenses) == (30000, 3000)
    assert daily.net_profit == 4000 - 1000 - 100


def test_window_excludes_older_transactions(now):
    document = make_document(
        sales=[Sale(item_name="Daily Sale", revenue=70, timestamp=datetime(2024, 6, 1, tzinfo=UTC))],
    )
    report = build_report(document, Timeframe.MONTHLY, now)
    assert report.total_sales == 0
    assert report.total_purchases == 1000


def test_empty_document_reports_zeros(now):
    report = build_report(Document(), Timeframe.WEEKLY, now)
    assert report.total_sales == report.total_purchases == report.net_profit == 0
    assert report.chart_series == []
    assert report.chart_title == "Weekly Progress"


def test_report_does_not_mutate_document(now):
    document = make_document()
    before = document.model_dump()
    build_report(document, Timeframe.DAILY, now)
    assert document.model_dump() == before


def test_summarize_without_rounding():
    purchases = [Purchase(item_name="A", quantity=1, total_cost=0.1), Purchase(item_name="B", quantity=1, total_cost=0.2)]
    summary = summarize(purchases, [], rent=0, other_expenses_total=0, inventory_value=0)
    assert summary.total_purchases == 0.1 + 0.2
    assert summary.gross_profit == -(0.1 + 0.2)


def test_default_clock_uses_local_midnight(local_zone):
    local_zone("Asia/Manila")
    midnight = datetime.combine(date.today(), time()).astimezone()
    document = Document(
        sales=[
            Sale(item_name="Daily Sale", revenue=1, timestamp=midnight + timedelta(minutes=1)),
            Sale(item_name="Daily Sale", revenue=10, timestamp=midnight - timedelta(minutes=1)),
        ]
    )
    report = build_report(document, "daily")
    assert report.total_sales == 1
    assert report.generated_at.utcoffset() == timedelta(hours=8)

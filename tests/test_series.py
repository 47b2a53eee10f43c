from datetime import datetime, timedelta, timezone

from kiosk.aggregator import build_report
from kiosk.schemas import Document, Purchase, Sale
from kiosk.series import bucketize, daily_totals
from kiosk.timeframe import Timeframe

UTC = timezone.utc


def at(day, hour=12, tz=UTC):
    return datetime(2024, 7, day, hour, tzinfo=tz)


PURCHASES = [
    Purchase(item_name="Flour", quantity=1, total_cost=100, timestamp=at(16)),
    Purchase(item_name="Sauce", quantity=1, total_cost=50, timestamp=at(15, 9)),
]
SALES = [
    Sale(item_name="Daily Sale", revenue=400, timestamp=at(16, 18)),
    Sale(item_name="Daily Sale", revenue=300, timestamp=at(15, 20)),
    Sale(item_name="Daily Sale", revenue=25, timestamp=at(16, 21)),
]


def test_weekly_series_groups_by_day_sorted_with_weekday_labels():
    series = bucketize(PURCHASES, SALES, Timeframe.WEEKLY)
    assert [p.label for p in series] == ["Mon", "Tue"]
    assert (series[0].sales, series[0].purchases, series[0].gross_profit) == (300, 50, 250)
    assert (series[1].sales, series[1].purchases, series[1].gross_profit) == (425, 100, 325)
    assert all(p.net_profit is None for p in series)


def test_monthly_series_uses_short_date_labels():
    series = bucketize(PURCHASES, SALES, Timeframe.MONTHLY)
    assert [p.label for p in series] == ["Jul 15", "Jul 16"]


def test_days_without_activity_are_not_synthesized():
    sales = [
        Sale(item_name="Daily Sale", revenue=10, timestamp=at(1)),
        Sale(item_name="Daily Sale", revenue=20, timestamp=at(9)),
    ]
    series = bucketize([], sales, Timeframe.MONTHLY)
    assert [p.label for p in series] == ["Jul 1", "Jul 9"]
    assert [p.purchases for p in series] == [0, 0]


def test_days_are_keyed_in_utc():
    late_evening_new_york = datetime(2024, 7, 16, 22, 30, tzinfo=timezone(timedelta(hours=-4)))
    sales = [Sale(item_name="Daily Sale", revenue=10, timestamp=late_evening_new_york)]
    series = bucketize([], sales, Timeframe.WEEKLY)
    assert [p.label for p in series] == ["Wed"]


def test_daily_totals_skips_undated():
    df = daily_totals([Purchase(item_name="X", quantity=1, total_cost=9)], SALES)
    assert list(df["sales"]) == [300, 425]
    assert list(df["purchases"]) == [0, 0]


def test_summary_point_for_all_and_daily():
    series = bucketize(PURCHASES, SALES, Timeframe.ALL, net_profit=-10)
    assert len(series) == 1
    point = series[0]
    assert point.label == "Summary"
    assert (point.sales, point.purchases, point.gross_profit, point.net_profit) == (725, 150, 575, -10)

    assert bucketize([], [], Timeframe.DAILY)[0].label == "Today's Summary"


def test_report_series_matches_window(now):
    document = Document(purchases=PURCHASES, sales=SALES, rent=3000)
    report = build_report(document, Timeframe.DAILY, now)
    assert report.chart_title == "Today's Summary"
    [point] = report.chart_series
    assert point.sales == 0
    assert point.net_profit == report.net_profit == -100

    weekly = build_report(document, Timeframe.WEEKLY, now)
    assert sum(p.sales for p in weekly.chart_series) == weekly.total_sales

import pandas as pd

from . import utils
from .schemas import ChartPoint, Purchase, Sale
from .timeframe import Timeframe

SUMMARY_LABELS = {
    Timeframe.ALL: "Summary",
    Timeframe.DAILY: "Today's Summary",
}

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def daily_totals(purchases: list[Purchase], sales: list[Sale]) -> pd.DataFrame:
    """
    Sums sales revenue and purchase cost per UTC calendar day.
    Returns a frame indexed by date, sorted chronologically, with columns
    `sales` and `purchases`. Undated transactions are skipped.
    """
    rows = [
        {"day": utils.utc_day(s.timestamp), "sales": s.revenue, "purchases": 0.0}
        for s in sales
        if s.timestamp is not None
    ]
    rows += [
        {"day": utils.utc_day(p.timestamp), "sales": 0.0, "purchases": p.total_cost}
        for p in purchases
        if p.timestamp is not None
    ]
    if not rows:
        return pd.DataFrame(columns=["sales", "purchases"], index=pd.Index([], name="day"))

    df = pd.DataFrame(rows)
    return df.groupby("day")[["sales", "purchases"]].sum().sort_index()


def _day_label(day, timeframe: Timeframe) -> str:
    # Fixed English names; strftime would follow the process locale.
    if timeframe is Timeframe.WEEKLY:
        return WEEKDAYS[day.weekday()]
    return f"{MONTHS[day.month - 1]} {day.day}"


def bucketize(
    purchases: list[Purchase],
    sales: list[Sale],
    timeframe: Timeframe,
    net_profit: float = 0.0,
) -> list[ChartPoint]:
    """
    Builds the chart series for already-filtered transactions.

    weekly/monthly: one point per active day (no empty days are synthesized),
    labelled "Mon" or "Oct 5". Net profit is left out of per-day points.
    all/daily: a single whole-window point carrying `net_profit`.
    """
    if timeframe in SUMMARY_LABELS:
        total_sales = sum((s.revenue for s in sales), 0.0)
        total_purchases = sum((p.total_cost for p in purchases), 0.0)
        return [
            ChartPoint(
                label=SUMMARY_LABELS[timeframe],
                sales=total_sales,
                purchases=total_purchases,
                gross_profit=total_sales - total_purchases,
                net_profit=net_profit,
            )
        ]

    df = daily_totals(purchases, sales)
    return [
        ChartPoint(
            label=_day_label(day, timeframe),
            sales=float(row["sales"]),
            purchases=float(row["purchases"]),
            gross_profit=float(row["sales"] - row["purchases"]),
        )
        for day, row in df.iterrows()
    ]

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from . import settings, utils, valuation
from .schemas import Document, Purchase, Report, Sale
from .series import bucketize
from .timeframe import Timeframe, filter_transactions, prorate

logger = logging.getLogger(__name__)


class FinancialSummary(BaseModel):
    total_sales: float
    total_purchases: float
    inventory_value: float
    rent: float
    other_expenses: float
    cogs: float
    gross_profit: float
    net_profit: float


def summarize(
    purchases: list[Purchase],
    sales: list[Sale],
    rent: float,
    other_expenses_total: float,
    inventory_value: float,
) -> FinancialSummary:
    """
    Metrics for one window. Inputs are already filtered and prorated.

    Every purchase in the window is counted as cost of goods sold for that
    window; there is no matching against the stock actually consumed.
    No rounding happens here.
    """
    total_purchases = sum((p.total_cost for p in purchases), 0.0)
    total_sales = sum((s.revenue for s in sales), 0.0)
    cogs = total_purchases
    gross_profit = total_sales - cogs
    net_profit = gross_profit - rent - other_expenses_total

    return FinancialSummary(
        total_sales=total_sales,
        total_purchases=total_purchases,
        inventory_value=inventory_value,
        rent=rent,
        other_expenses=other_expenses_total,
        cogs=cogs,
        gross_profit=gross_profit,
        net_profit=net_profit,
    )


def build_report(
    document: Document,
    timeframe: "Timeframe | str",
    now: Optional[datetime] = None,
) -> Report:
    """
    Pure function of (document, timeframe, now). `now` defaults to the local wall
    clock; pass a fixed instant for reproducible reports.
    """
    timeframe = Timeframe.parse(timeframe)
    now = now or utils.local_now()

    purchases = filter_transactions(document.purchases, timeframe, now)
    sales = filter_transactions(document.sales, timeframe, now)
    logger.debug(
        f"{timeframe.value}: {len(purchases)}/{len(document.purchases)} purchases, "
        f"{len(sales)}/{len(document.sales)} sales in window"
    )

    expenses_total = sum((e.amount for e in document.other_expenses), 0.0)
    summary = summarize(
        purchases,
        sales,
        rent=prorate(document.rent, timeframe),
        other_expenses_total=prorate(expenses_total, timeframe),
        inventory_value=valuation.total_value(document.inventory),
    )

    return Report(
        timeframe=timeframe.value,
        generated_at=utils.as_aware(now),
        chart_series=bucketize(purchases, sales, timeframe, net_profit=summary.net_profit),
        chart_title=settings.CHART_TITLES[timeframe.value],
        **summary.model_dump(),
    )

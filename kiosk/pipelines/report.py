import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from kiosk import aggregator, data_handler, utils
from kiosk.pipeline import DataPipeline
from kiosk.schemas import Document, Report
from kiosk.store import DocumentStore
from kiosk.timeframe import Timeframe

logger = logging.getLogger(__name__)


class ReportPipeline(DataPipeline):
    def __init__(
        self,
        store: DocumentStore,
        timeframe: "Timeframe | str" = Timeframe.ALL,
        now: Optional[datetime] = None,
        save_outputs: bool = True,
    ):
        super().__init__("financial", store, save_outputs=save_outputs)
        self.timeframe = Timeframe.parse(timeframe)
        # Fixed per run, so every figure in one report shares the same clock.
        self.now = now or utils.local_now()

    def transform(self, document: Document) -> Report | None:
        logger.info(f"--- Building {self.timeframe.value} report ---")
        try:
            return aggregator.build_report(document, self.timeframe, self.now)
        except ValidationError as e:
            logger.error("❌ Report validation failed!")
            logger.error(e)
            return None

    def summarize(self, report: Report) -> list[str]:
        fmt = data_handler.format_currency
        lines = [
            f"{report.chart_title} ({report.timeframe})",
            f"Total Sales:       {fmt(report.total_sales)}",
            f"Total Purchases:   {fmt(report.total_purchases)}",
            f"COGS:              {fmt(report.cogs)}",
            f"Gross Profit:      {fmt(report.gross_profit)}",
            f"Rent:              {fmt(report.rent)}",
            f"Other Expenses:    {fmt(report.other_expenses)}",
            f"Net Profit:        {fmt(report.net_profit)}",
            f"Inventory Value:   {fmt(report.inventory_value)}",
        ]
        if not report.chart_series:
            lines.append("No activity in this window.")
        for point in report.chart_series:
            lines.append(
                f"  {point.label}: sales {fmt(point.sales)}, purchases {fmt(point.purchases)}, "
                f"gross {fmt(point.gross_profit)}"
            )
        return lines

    def save(self, report: Report):
        data_handler.save_report(report)

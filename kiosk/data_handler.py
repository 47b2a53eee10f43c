import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import settings
from . import utils
from .schemas import InventoryValuationRow, Report

logger = logging.getLogger(__name__)


def format_currency(value: float) -> str:
    """Presentation only: the engine itself never rounds."""
    sign = "-" if value < 0 else ""
    return f"{sign}{settings.CURRENCY_SYMBOL}{abs(value):,.2f}"


def _output_base(prefix: str, label: str, now: Optional[datetime]) -> Path:
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename(now)
    return settings.OUTPUT_DIR / f"{prefix}-{label}-{date_suffix}"


def save_report(report: Report) -> list[Path]:
    """Saves the chart series to CSV and conditionally the full report to JSON."""
    base = _output_base(settings.REPORT_FILENAME_PREFIX, report.timeframe, report.generated_at)
    csv_path = base.with_suffix(".csv")
    json_path = base.with_suffix(".json")

    df = pd.DataFrame(
        [point.model_dump(by_alias=True) for point in report.chart_series],
        columns=["label", "sales", "purchases", "grossProfit", "netProfit"],
    )
    df.to_csv(csv_path, index=False)
    logger.info(f"✅ Chart series saved to: {csv_path}")
    saved = [csv_path]

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(mode="json", by_alias=True), f, indent=2)
        logger.info(f"✅ JSON output saved to: {json_path}")
        saved.append(json_path)
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")
    return saved


def save_inventory(rows: list[InventoryValuationRow], now: Optional[datetime] = None) -> list[Path]:
    """Saves the inventory valuation table to CSV and conditionally to JSON."""
    base = _output_base(settings.INVENTORY_FILENAME_PREFIX, "valuation", now)
    csv_path = base.with_suffix(".csv")
    json_path = base.with_suffix(".json")

    csv_columns = [info.alias for info in InventoryValuationRow.model_fields.values()]
    df = pd.DataFrame([row.model_dump(by_alias=True) for row in rows], columns=csv_columns)
    df.to_csv(csv_path, index=False)
    logger.info(f"✅ Inventory valuation saved to: {csv_path}")
    saved = [csv_path]

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json_data = [row.model_dump(mode="json", by_alias=True) for row in rows]
            json.dump(json_data, f, indent=2)
        logger.info(f"✅ JSON output saved to: {json_path}")
        saved.append(json_path)
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")
    return saved

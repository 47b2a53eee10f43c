import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from kiosk import data_handler, utils, valuation
from kiosk.pipeline import DataPipeline
from kiosk.schemas import Document, InventoryValuationRow
from kiosk.store import DocumentStore

logger = logging.getLogger(__name__)


class InventoryPipeline(DataPipeline):
    def __init__(self, store: DocumentStore, now: Optional[datetime] = None, save_outputs: bool = True):
        super().__init__("inventory", store, save_outputs=save_outputs)
        self.now = now or utils.local_now()
        self.inventory = []

    def transform(self, document: Document) -> list[InventoryValuationRow] | None:
        logger.info("--- Valuing Inventory ---")
        self.inventory = document.inventory

        try:
            logger.info("Validating data against schema...")
            rows = [
                InventoryValuationRow(
                    name=item.name,
                    quantity=item.quantity,
                    cost_per_unit=item.cost_per_unit,
                    total_value=valuation.item_value(item),
                    date_added=item.date_added,
                )
                for item in sorted(document.inventory, key=lambda i: i.name)
            ]
            logger.info(f"✅ Data validation successful ({len(rows)} items).")
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None
        return rows

    def summarize(self, rows: list[InventoryValuationRow]) -> list[str]:
        fmt = data_handler.format_currency
        lines = [
            f"{row.name}: {row.quantity:g} @ {fmt(row.cost_per_unit)} = {fmt(row.total_value)}"
            for row in rows
        ]
        total = sum((row.total_value for row in rows), 0.0)
        lines.append(f"Total Inventory Value: {fmt(total)}")

        # Cost per unit a purchase would be pre-filled with, catalog included.
        lines.append("Purchase prices:")
        lines += [
            f"  {name}: {fmt(price)}" for name, price in valuation.price_list(self.inventory)
        ]
        return lines

    def save(self, rows: list[InventoryValuationRow]):
        data_handler.save_inventory(rows, self.now)

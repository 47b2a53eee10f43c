import logging
from datetime import datetime
from typing import Optional

from . import utils
from .schemas import (
    Document,
    Expense,
    ExpenseEntry,
    InventoryItem,
    InventoryItemEntry,
    Purchase,
    PurchaseEntry,
    Sale,
    SaleEntry,
)
from .store import DocumentStore
from .valuation import apply_purchase

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """A change that was refused; the document is left as it was."""


class DuplicateItemError(LedgerError):
    pass


class ItemNotFoundError(LedgerError):
    pass


def _stamp(now: Optional[datetime]) -> datetime:
    return now or utils.local_now().astimezone()


def record_purchase(store: DocumentStore, entry: PurchaseEntry, now: Optional[datetime] = None) -> Document:
    """Logs the purchase and re-values the purchased item."""
    purchase = Purchase(
        item_name=entry.item_name,
        quantity=entry.quantity,
        total_cost=entry.total_cost,
        timestamp=_stamp(now),
    )

    def updater(doc: Document) -> Document:
        return doc.model_copy(
            update={
                "purchases": [*doc.purchases, purchase],
                "inventory": apply_purchase(doc.inventory, purchase),
            }
        )

    logger.info(f"Purchase: {entry.quantity:g} x {entry.item_name} for {entry.total_cost:.2f}")
    return store.write(updater)


def record_sale(store: DocumentStore, entry: SaleEntry, now: Optional[datetime] = None) -> Document:
    sale = Sale(
        item_name=entry.item_name,
        quantity=entry.quantity,
        revenue=entry.revenue,
        timestamp=_stamp(now),
    )
    logger.info(f"Sale: {entry.item_name} for {entry.revenue:.2f}")
    return store.write(lambda doc: doc.model_copy(update={"sales": [*doc.sales, sale]}))


def add_inventory_item(
    store: DocumentStore, entry: InventoryItemEntry, now: Optional[datetime] = None
) -> Document:
    """
    Adds a new stock line. Names are compared case-insensitively here so
    "cheese" cannot sit next to "Cheese"; restocking goes through purchases.
    """
    item = InventoryItem(
        name=entry.name,
        quantity=entry.quantity,
        cost_per_unit=entry.cost_per_unit,
        date_added=entry.date_added or _stamp(now),
    )

    def updater(doc: Document) -> Document:
        wanted = entry.name.lower()
        if any(existing.name.lower() == wanted for existing in doc.inventory):
            logger.warning(f"⚠️ '{entry.name}' is already in inventory. Use a purchase to add quantity.")
            raise DuplicateItemError(
                f"Item '{entry.name}' already exists in inventory. Use the purchase form to add quantity."
            )
        return doc.model_copy(update={"inventory": [*doc.inventory, item]})

    return store.write(updater)


def update_inventory_item(store: DocumentStore, entry: InventoryItemEntry) -> Document:
    """Replaces the item with exactly this name."""

    def updater(doc: Document) -> Document:
        inventory = []
        found = False
        for existing in doc.inventory:
            if existing.name == entry.name:
                found = True
                existing = existing.model_copy(
                    update={
                        "quantity": entry.quantity,
                        "cost_per_unit": entry.cost_per_unit,
                        "date_added": entry.date_added or existing.date_added,
                    }
                )
            inventory.append(existing)
        if not found:
            raise ItemNotFoundError(f"Item '{entry.name}' is not in inventory.")
        return doc.model_copy(update={"inventory": inventory})

    return store.write(updater)


def delete_inventory_item(store: DocumentStore, name: str) -> Document:
    def updater(doc: Document) -> Document:
        remaining = [item for item in doc.inventory if item.name != name]
        if len(remaining) == len(doc.inventory):
            raise ItemNotFoundError(f"Item '{name}' is not in inventory.")
        return doc.model_copy(update={"inventory": remaining})

    logger.info(f"Removing '{name}' from inventory")
    return store.write(updater)


def set_rent(store: DocumentStore, rent: float) -> Document:
    """Sets the monthly rent."""
    if rent < 0:
        raise ValueError("Rent cannot be negative.")
    return store.write(lambda doc: doc.model_copy(update={"rent": float(rent)}))


def add_expense(store: DocumentStore, entry: ExpenseEntry) -> Document:
    """Adds a recurring monthly expense line."""
    expense = Expense(name=entry.name, amount=entry.amount)
    return store.write(
        lambda doc: doc.model_copy(update={"other_expenses": [*doc.other_expenses, expense]})
    )


def delete_expense(store: DocumentStore, index: int) -> Document:
    """Removes the expense at `index` (position in the list)."""

    def updater(doc: Document) -> Document:
        if not 0 <= index < len(doc.other_expenses):
            raise IndexError(f"No expense at position {index}.")
        expenses = [e for i, e in enumerate(doc.other_expenses) if i != index]
        return doc.model_copy(update={"other_expenses": expenses})

    return store.write(updater)

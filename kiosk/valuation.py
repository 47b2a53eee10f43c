"""Weighted-average inventory costing."""

from typing import Mapping, Optional

from . import settings
from .schemas import InventoryItem, Purchase


def apply_purchase(inventory: list[InventoryItem], purchase: Purchase) -> list[InventoryItem]:
    """
    Returns a new inventory list with `purchase` folded in.

    An existing item (matched by exact name) gets its cost per unit re-blended:
        new_qty  = old_qty + bought
        new_cost = (old_cost * old_qty + total_cost) / new_qty
    An unknown item is appended at the purchase's unit cost.
    """
    updated = []
    found = False
    for item in inventory:
        if not found and item.name == purchase.item_name:
            found = True
            new_quantity = item.quantity + purchase.quantity
            blended_cost = item.cost_per_unit * item.quantity + purchase.total_cost
            updated.append(
                item.model_copy(
                    update={
                        "quantity": new_quantity,
                        "cost_per_unit": blended_cost / new_quantity if new_quantity > 0 else 0.0,
                    }
                )
            )
        else:
            updated.append(item)

    if not found:
        updated.append(
            InventoryItem(
                name=purchase.item_name,
                quantity=purchase.quantity,
                cost_per_unit=(
                    purchase.total_cost / purchase.quantity if purchase.quantity > 0 else 0.0
                ),
                date_added=purchase.timestamp,
            )
        )
    return updated


def item_value(item: InventoryItem) -> float:
    return item.quantity * item.cost_per_unit


def total_value(inventory: list[InventoryItem]) -> float:
    return sum((item_value(item) for item in inventory), 0.0)


def price_list(
    inventory: list[InventoryItem], catalog: Optional[Mapping[str, float]] = None
) -> list[tuple[str, float]]:
    """
    Items that can be purchased with their current cost per unit, sorted by name.
    Inventory costs override the catalog defaults.
    """
    prices = dict(settings.CATALOG if catalog is None else catalog)
    for item in inventory:
        prices[item.name] = item.cost_per_unit
    return sorted(prices.items(), key=lambda entry: entry[0])

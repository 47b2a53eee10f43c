import logging
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    Field,
    ValidationError,
    WrapValidator,
)

from . import utils

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def _record_list(value: Any) -> list:
    """
    Repairs a stored record list: anything that is not a list becomes empty,
    entries that are not records are dropped. The rest of the document is kept.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"⚠️ Expected a list of records, got {type(value).__name__}. Using an empty list.")
        return []
    records = [entry for entry in value if isinstance(entry, (dict, BaseModel))]
    if len(records) != len(value):
        logger.warning(f"⚠️ Dropped {len(value) - len(records)} unreadable record(s).")
    return records


def _lenient_timestamp(value: Any, handler) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return handler(value)
    except ValidationError:
        logger.warning(f"Ignoring unreadable timestamp: {value!r}")
        return None


# Stored values are coerced once, here, so the arithmetic downstream never
# has to re-check them.
Number = Annotated[float, BeforeValidator(utils.to_number)]
Text = Annotated[str, BeforeValidator(_coerce_text)]
Timestamp = Annotated[Optional[datetime], WrapValidator(_lenient_timestamp)]


# --- Persisted records ---


class InventoryItem(BaseModel):
    """A stock line. `name` is the identity key (case-sensitive)."""

    name: Text = Field(
        default="", alias="name", validation_alias=AliasChoices("name", "item")
    )
    quantity: Number = 0.0
    cost_per_unit: Number = Field(default=0.0, alias="costPerUnit")
    date_added: Timestamp = Field(
        default=None,
        alias="dateAdded",
        validation_alias=AliasChoices("dateAdded", "date"),
    )

    class Config:
        populate_by_name = True


class Purchase(BaseModel):
    item_name: Text = Field(
        default="", alias="itemName", validation_alias=AliasChoices("itemName", "item")
    )
    quantity: Number = 0.0
    total_cost: Number = Field(
        default=0.0, alias="totalCost", validation_alias=AliasChoices("totalCost", "cost")
    )
    timestamp: Timestamp = Field(
        default=None, validation_alias=AliasChoices("timestamp", "date")
    )

    class Config:
        populate_by_name = True
        frozen = True


class Sale(BaseModel):
    item_name: Text = Field(
        default="", alias="itemName", validation_alias=AliasChoices("itemName", "item")
    )
    quantity: Number = 0.0
    revenue: Number = 0.0
    timestamp: Timestamp = Field(
        default=None, validation_alias=AliasChoices("timestamp", "date")
    )

    class Config:
        populate_by_name = True
        frozen = True


class Expense(BaseModel):
    """A recurring monthly cost line."""

    name: Text = ""
    amount: Number = 0.0


class Document(BaseModel):
    """
    The single persisted unit: everything the kiosk knows.
    Purchases and sales are append-only logs; inventory and expenses are
    edited by key or position.
    """

    inventory: Annotated[list[InventoryItem], BeforeValidator(_record_list)] = Field(default_factory=list)
    purchases: Annotated[list[Purchase], BeforeValidator(_record_list)] = Field(default_factory=list)
    sales: Annotated[list[Sale], BeforeValidator(_record_list)] = Field(default_factory=list)
    rent: Number = 0.0
    other_expenses: Annotated[list[Expense], BeforeValidator(_record_list)] = Field(
        default_factory=list, alias="otherExpenses"
    )

    class Config:
        populate_by_name = True


# --- New input (strict) ---


class PurchaseEntry(BaseModel):
    item_name: str = Field(..., min_length=1, alias="itemName")
    quantity: float = Field(..., gt=0)
    total_cost: float = Field(..., ge=0, alias="totalCost")

    class Config:
        populate_by_name = True

    @classmethod
    def from_unit_price(cls, item_name: str, quantity: float, unit_price: float) -> "PurchaseEntry":
        return cls(item_name=item_name, quantity=quantity, total_cost=quantity * unit_price)


class SaleEntry(BaseModel):
    item_name: str = Field(..., min_length=1, alias="itemName")
    quantity: float = Field(default=1, ge=0)
    revenue: float = Field(..., ge=0)

    class Config:
        populate_by_name = True

    @classmethod
    def daily_total(cls, amount: float) -> "SaleEntry":
        """The kiosk books its takings as one lump sum per day."""
        return cls(item_name="Daily Sale", quantity=1, revenue=amount)


class ExpenseEntry(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)


class InventoryItemEntry(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(default=0, ge=0)
    cost_per_unit: float = Field(default=0, ge=0, alias="costPerUnit")
    date_added: Optional[datetime] = Field(default=None, alias="dateAdded")

    class Config:
        populate_by_name = True


# --- Derived (never persisted) ---


class ChartPoint(BaseModel):
    label: str
    sales: float = 0.0
    purchases: float = 0.0
    gross_profit: float = Field(default=0.0, alias="grossProfit")
    # Only set on whole-window points
    net_profit: Optional[float] = Field(default=None, alias="netProfit")

    class Config:
        populate_by_name = True


class Report(BaseModel):
    timeframe: str
    generated_at: datetime = Field(..., alias="generatedAt")
    total_sales: float = Field(..., alias="totalSales")
    total_purchases: float = Field(..., alias="totalPurchases")
    inventory_value: float = Field(..., alias="inventoryValue")
    rent: float
    other_expenses: float = Field(..., alias="otherExpenses")
    cogs: float
    gross_profit: float = Field(..., alias="grossProfit")
    net_profit: float = Field(..., alias="netProfit")
    chart_series: list[ChartPoint] = Field(default_factory=list, alias="chartSeries")
    chart_title: str = Field(..., alias="chartTitle")

    class Config:
        populate_by_name = True


class InventoryValuationRow(BaseModel):
    """One line of the inventory valuation table."""

    name: str = Field(..., alias="Item")
    quantity: float = Field(default=0, ge=0, alias="Quantity")
    cost_per_unit: float = Field(default=0, ge=0, alias="Cost Per Unit")
    total_value: float = Field(default=0, ge=0, alias="Total Value")
    date_added: Optional[datetime] = Field(default=None, alias="Date Added")

    class Config:
        populate_by_name = True

import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# --- Path Configuration ---
DATA_DIR = BASE_DIR / os.getenv("DATA_DIR", "data")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Persistence ---
# The whole ledger lives under this one key of the blob store.
STORE_KEY = os.getenv("STORE_KEY", "appData")
LEGACY_EXPENSE_NAME = "Legacy Other Expenses"

# --- Report Configuration ---
DEFAULT_TIMEFRAME = os.getenv("DEFAULT_TIMEFRAME", "all")
REPORT_FILENAME_PREFIX = os.getenv("REPORT_FILENAME_PREFIX", "Pizza-Kiosk-Report")
INVENTORY_FILENAME_PREFIX = os.getenv("INVENTORY_FILENAME_PREFIX", "Pizza-Kiosk-Inventory")
SAVE_JSON_OUTPUT = _env_bool("SAVE_JSON_OUTPUT", True)
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₱")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Day/week/month windows move slowly, so a minute is plenty.
REFRESH_INTERVAL_SECONDS = 60

# --- Shared Business Logic ---
# Fixed monthly costs are scaled down by these divisors. A month is taken
# as 30 days or 4 weeks; this is an approximation, not calendar proration.
PRORATION_DIVISORS = {
    "all": 1,
    "monthly": 1,
    "weekly": 4,
    "daily": 30,
}

CHART_TITLES = {
    "all": "Overall Summary",
    "monthly": "Monthly Progress",
    "weekly": "Weekly Progress",
    "daily": "Today's Summary",
}

# Items that can always be purchased, even before they appear in inventory.
# Maps item name -> default cost per unit.
CATALOG: dict[str, float] = {}

import logging
import sys
import time

from kiosk import settings
from kiosk.blob_store import FileBlobStore
from kiosk.logger import setup_logger
from kiosk.pipelines.inventory import InventoryPipeline
from kiosk.pipelines.report import ReportPipeline
from kiosk.store import DocumentStore
from kiosk.timeframe import Timeframe

logger = logging.getLogger(__name__)


def run_process(timeframe: "Timeframe | str" = settings.DEFAULT_TIMEFRAME):
    """Main orchestration function: financial report plus inventory valuation."""
    store = DocumentStore(FileBlobStore(settings.DATA_DIR), settings.STORE_KEY)
    report = ReportPipeline(store, timeframe).run()
    InventoryPipeline(store).run()
    return report


def watch(timeframe: "Timeframe | str" = settings.DEFAULT_TIMEFRAME):
    """Recomputes on a timer so day/week/month windows stay current."""
    logger.info(f"Refreshing every {settings.REFRESH_INTERVAL_SECONDS}s. Ctrl+C to stop.")
    try:
        while True:
            run_process(timeframe)
            time.sleep(settings.REFRESH_INTERVAL_SECONDS)
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    setup_logger(None, getattr(logging, settings.LOG_LEVEL, logging.INFO))

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    selected = args[0] if args else settings.DEFAULT_TIMEFRAME
    try:
        selected = Timeframe.parse(selected)
    except ValueError as e:
        logger.error(f"❌ {e}")
        sys.exit(2)

    if "--watch" in sys.argv:
        watch(selected)
    else:
        run_process(selected)

import logging
from abc import ABC, abstractmethod
from typing import Any

from kiosk.schemas import Document
from kiosk.store import DocumentStore

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines (Report, Inventory).
    Follows an Extract -> Transform -> Load (ETL) pattern over the stored document.
    """

    def __init__(self, report_type: str, store: DocumentStore, save_outputs: bool = True):
        self.report_type = report_type
        self.store = store
        self.save_outputs = save_outputs

    def run(self) -> Any:
        """
        Orchestrates the pipeline execution and returns the transformed result.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        document = self.extract()

        # --- 2. TRANSFORM ---
        result = self.transform(document)
        if result is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(result)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return result

    def extract(self) -> Document:
        """Takes a read-only snapshot of the stored document."""
        return self.store.read()

    @abstractmethod
    def transform(self, document: Document) -> Any | None:
        """
        Derives the validated output models from the document.
        Returns None when the output does not validate.
        """
        pass

    @abstractmethod
    def summarize(self, result: Any) -> list[str]:
        """Human-readable lines logged before saving."""
        pass

    def load(self, result: Any):
        """
        Logs a summary and saves outputs to disk.
        """
        logger.info("\n--- Summary ---")
        for line in self.summarize(result):
            logger.info(line)

        if self.save_outputs:
            self.save(result)
        else:
            logger.info("🧪 Output saving disabled. Skipping files.")

    @abstractmethod
    def save(self, result: Any):
        pass

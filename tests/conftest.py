import time
from datetime import datetime, timezone

import pytest

from kiosk import settings
from kiosk.blob_store import MemoryBlobStore
from kiosk.store import DocumentStore


@pytest.fixture
def now():
    # A Wednesday; the week started Monday 2024-07-15.
    return datetime(2024, 7, 17, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def store(blob_store):
    return DocumentStore(blob_store)


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    out = tmp_path / "output"
    monkeypatch.setattr(settings, "OUTPUT_DIR", out)
    return out


@pytest.fixture
def local_zone(monkeypatch):
    """Switches the process time zone for one test: `local_zone("Asia/Manila")`."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def use(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield use
    monkeypatch.undo()
    time.tzset()

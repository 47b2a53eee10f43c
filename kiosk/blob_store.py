import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol


class BlobStore(Protocol):
    """A byte-oriented key-value store: the only durability substrate."""

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, data: bytes) -> None: ...


class FileBlobStore:
    """Keeps each key as `<key>.json` inside one directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write next to the target and swap it in, so a failed write never
        # leaves a half-written document behind.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryBlobStore:
    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self.blobs: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def set(self, key: str, data: bytes) -> None:
        self.blobs[key] = data

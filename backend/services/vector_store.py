"""Vector store persisted as a single JSON snapshot file."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from models.snapshot import VectorStoreSnapshot
from services.errors import StoreUnavailableError
from config import VECTOR_STORE_PATH, VECTOR_STORE_CACHE

logger = logging.getLogger(__name__)


class VectorStore:
    """Load and atomically replace the vector store snapshot file."""

    def __init__(self, path: str = VECTOR_STORE_PATH, cache: bool = VECTOR_STORE_CACHE):
        """
        Initialize the vector store.

        Args:
            path: Location of the snapshot JSON file
            cache: Reuse the parsed snapshot while the file is unchanged
        """
        self.path = Path(path)
        self.cache = cache
        self._cached: Optional[VectorStoreSnapshot] = None
        self._cached_stamp: Optional[Tuple[int, int]] = None

        logger.info(f"Initialized VectorStore at: {self.path}")

    def exists(self) -> bool:
        """Whether a snapshot file is present."""
        return self.path.is_file()

    def load(self) -> VectorStoreSnapshot:
        """
        Read the current snapshot.

        Returns:
            The parsed snapshot. With caching on, the same object is returned
            until the file's modification time or size changes.

        Raises:
            StoreUnavailableError: If the file is missing, unreadable or malformed
        """
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            raise StoreUnavailableError(
                "Vector store not found. Please run the ingestion step (python ingest_documents.py) first.",
                details={"path": str(self.path)}
            )
        except OSError as e:
            raise StoreUnavailableError(
                f"Vector store is not accessible: {e}",
                details={"path": str(self.path)}
            ) from e

        stamp = (stat.st_mtime_ns, stat.st_size)
        if self.cache and self._cached is not None and self._cached_stamp == stamp:
            return self._cached

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            snapshot = VectorStoreSnapshot.from_dict(data)
        except OSError as e:
            raise StoreUnavailableError(
                f"Failed to read vector store: {e}",
                details={"path": str(self.path)}
            ) from e
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreUnavailableError(
                f"Vector store file is malformed: {e}. Rebuild it with the ingestion step.",
                details={"path": str(self.path), "error_type": type(e).__name__}
            ) from e

        logger.info(
            f"Loaded {snapshot.metadata.total_chunks} chunks from {len(snapshot.metadata.source_files)} files "
            f"(embedding model: {snapshot.metadata.embedding_model})"
        )

        if self.cache:
            self._cached = snapshot
            self._cached_stamp = stamp
        return snapshot

    def save(self, snapshot: VectorStoreSnapshot) -> None:
        """
        Replace the snapshot file with `snapshot`.

        The JSON is written to a temporary file in the same directory and
        moved over the old file, so readers see either the old or the new
        snapshot in full.

        Raises:
            StoreUnavailableError: If the file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreUnavailableError(
                f"Failed to write vector store: {e}",
                details={"path": str(self.path)}
            ) from e

        self._cached = None
        self._cached_stamp = None
        logger.info(f"Vector store saved to: {self.path} ({snapshot.metadata.total_chunks} chunks)")

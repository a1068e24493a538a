from abc import ABC, abstractmethod
import time
from pathlib import Path
from typing import Optional, Tuple
import logging

from wxmetar.config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class CachedSource(ABC):
    """
    Base class for METAR document sources that cache to disk.

    This class handles:
    - Caching each station's document to `metar-{STATION}.xml`
    - Checking cache validity based on file age
    - Fetching and caching a new document when needed

    Subclasses implement `fetch_document`, which must return the raw
    document bytes or raise `FetchError`.
    """

    CACHE_PREFIX = "metar-"
    CACHE_EXT = "xml"

    def __init__(self, cache_dir: str, ttl_seconds: int = CACHE_TTL_SECONDS):
        """
        Initialize the cached source.

        Args:
            cache_dir: Directory holding cached documents
            ttl_seconds: Maximum age of a cached document in seconds
        """
        self.cache_path = Path(cache_dir)
        self.cache_path.mkdir(parents=True, exist_ok=True)
        self.ttl_seconds = ttl_seconds
        self._force_refresh = False
        self._never_refresh = False

    def set_force_refresh(self, force_refresh: bool = True) -> None:
        """
        Set whether to always fetch, ignoring any cached document.

        Args:
            force_refresh: Whether to force refresh of cached data
        """
        self._force_refresh = force_refresh

    def set_never_refresh(self, never_refresh: bool = True) -> None:
        """
        Set whether to use a cached document regardless of its age.

        Args:
            never_refresh: Whether to ignore cache timestamps
        """
        self._never_refresh = never_refresh

    @abstractmethod
    def fetch_document(self, station: str) -> bytes:
        """Retrieve a fresh document for a station."""

    def get_cache_file(self, station: str) -> Path:
        """Get the cache file path for a station."""
        return self.cache_path / f"{self.CACHE_PREFIX}{station}.{self.CACHE_EXT}"

    def _is_cache_valid(self, cache_file: Path) -> Tuple[bool, Optional[str]]:
        """
        Check if the cache file is valid (exists and not too old).

        Returns:
            Tuple[bool, Optional[str]]: (is_valid, reason if invalid)
        """
        if self._force_refresh:
            return False, "force refresh"
        if not cache_file.exists():
            return False, "missing"
        if self._never_refresh:
            return True, None
        file_age = time.time() - cache_file.stat().st_mtime
        if file_age < self.ttl_seconds:
            return True, None
        return False, "expired"

    def get_document(self, station: str) -> bytes:
        """
        Get a station's document from cache or fetch it if not available.

        A failed fetch leaves any previous cache file untouched. An unreadable
        cache file counts as a miss, and a document that cannot be written
        to the cache is still returned.

        Args:
            station: ICAO station code

        Returns:
            The raw document

        Raises:
            FetchError: if the document has to be fetched and cannot be
        """
        cache_file = self.get_cache_file(station)

        is_valid, reason = self._is_cache_valid(cache_file)
        if is_valid:
            try:
                with open(cache_file, 'rb') as f:
                    data = f.read()
            except OSError as e:
                logger.warning(f"Cannot read {cache_file}: {e}")
                data = b""
                reason = "unreadable"
            else:
                reason = "empty"
            if data:
                logger.info(f"{cache_file.name} retrieved from cache")
                return data

        data = self.fetch_document(station)
        logger.info(f"{cache_file.name} [{reason}] fetched using {self.__class__.__name__}")

        try:
            with open(cache_file, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.warning(f"Cannot write {cache_file}: {e}")

        return data

    def purge(self) -> int:
        """
        Delete every cached document.

        Returns:
            Number of files removed
        """
        removed = 0
        for cache_file in self.cache_path.glob(f"{self.CACHE_PREFIX}*.{self.CACHE_EXT}"):
            try:
                cache_file.unlink()
            except OSError as e:
                logger.warning(f"Cannot remove {cache_file}: {e}")
                continue
            removed += 1
        logger.info(f"Purged {removed} cached documents from {self.cache_path}")
        return removed

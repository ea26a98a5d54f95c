"""
PDF Cache - Content-addressed on-disk store for downloaded PDFs.

Each source URL maps to one file named ``<hash>-<filename>`` where the hash
is the first 12 hex characters of SHA-256(url) and the filename is the last
path segment of the URL (kept for debuggability).

Key Concepts:
- Entries are created on the first successful fetch and never expire
- If the upstream document changes the entry goes stale silently
- Only bytes with a PDF header are stored; error pages never reach disk
- Writes are whole-file replacements, so readers never see a partial file
- Concurrent misses for the same URL are collapsed into one download
"""

import hashlib
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator
from urllib.parse import urlparse

from ncert_study.config import PDF_CACHE_DIR
from ncert_study.errors import NotFoundError, ParseError, StorageError
from ncert_study.ingestion.pdf_parser import looks_like_pdf
from ncert_study.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FILENAME = "ncert.pdf"
HASH_PREFIX_LENGTH = 12


def cache_filename(url: str) -> str:
    """
    Build the cache file name for a URL.

    Example:
        cache_filename("https://ncert.nic.in/textbook/pdf/jemh101.pdf")
        # -> '3f1c0a9be2d4-jemh101.pdf'
    """
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:HASH_PREFIX_LENGTH]
    original_name = urlparse(url).path.rstrip("/").split("/")[-1] or DEFAULT_FILENAME
    return f"{digest}-{original_name}"


class PdfCache:
    """
    Stores PDF bytes on local disk keyed by their source URL.

    Example:
        cache = PdfCache()
        data = cache.get_or_fetch(pdf_url, fetcher)
    """

    def __init__(self, directory: str | Path | None = None):
        """
        Initialize the cache.

        Args:
            directory: Where cached files live (created lazily on first write)
        """
        self.directory = Path(directory or PDF_CACHE_DIR)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, url: str) -> Path:
        """Return the cache path for a URL (whether or not it exists)."""
        return self.directory / cache_filename(url)

    def has(self, url: str) -> bool:
        return self.path_for(url).is_file()

    def get(self, url: str) -> bytes:
        """
        Read a cached document.

        Raises:
            NotFoundError: If the URL has not been cached
            StorageError: If the file exists but cannot be read
        """
        path = self.path_for(url)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"No cached PDF for {url}") from e
        except OSError as e:
            raise StorageError(f"Failed to read cached PDF {path}: {e}") from e

    def put(self, url: str, data: bytes) -> Path:
        """
        Store (or overwrite) the document for a URL.

        The bytes go to a temporary file in the cache directory which is then
        renamed over the target, so the last writer wins and no reader ever
        sees a half-written file.

        Returns:
            Path of the cache entry

        Raises:
            ParseError: If the bytes do not start like a PDF
            StorageError: If the directory or file cannot be written
        """
        if not looks_like_pdf(data):
            raise ParseError(f"Refusing to cache non-PDF response from {url}")

        path = self.path_for(url)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".part")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write cached PDF {path}: {e}") from e
        return path

    @contextmanager
    def _key_lock(self, url: str) -> Iterator[None]:
        """Hold the per-key lock; the lock is dropped once nobody uses it."""
        key = cache_filename(url)
        with self._locks_guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                self._lock_users[key] -= 1
                if not self._lock_users[key]:
                    del self._lock_users[key]
                    del self._locks[key]

    def get_or_fetch(self, url: str, fetcher: Callable[[str], bytes]) -> bytes:
        """
        Return cached bytes, downloading and storing them on a miss.

        Args:
            url: Source URL of the document
            fetcher: Function that downloads a URL and returns its bytes.
                Its errors propagate unchanged.

        Returns:
            The document bytes

        Raises:
            ParseError: If the downloaded body is not a PDF (nothing is cached)
        """
        if self.has(url):
            return self.get(url)

        with self._key_lock(url):
            # Another thread may have filled the entry while we waited
            if self.has(url):
                return self.get(url)

            logger.info("Cache miss, downloading %s", url)
            data = fetcher(url)
            path = self.put(url, data)
            logger.debug("Cached %d bytes at %s", len(data), path)
            return data

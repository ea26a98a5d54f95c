"""
Error types shared across the NCERT Study Library.

Every error raised on purpose by this package derives from NCERTError, so the
HTTP layer can map the whole family to JSON responses in one place.
"""


class NCERTError(Exception):
    """Base class for all library errors."""


class NotConfiguredError(NCERTError):
    """A required backend (live catalog, LLM) is not set up."""


class NotFoundError(NCERTError):
    """A requested book, chapter or cache entry does not exist."""


class FetchError(NCERTError):
    """An upstream request failed.

    Attributes:
        url: The URL that was requested
        status_code: HTTP status of the failed response, or None when the
            request never produced one (DNS, connection reset, ...)
    """

    def __init__(self, url: str, status_code: int | None = None, message: str | None = None):
        self.url = url
        self.status_code = status_code
        if message is None:
            if status_code is not None:
                message = f"Upstream request failed ({status_code}): {url}"
            else:
                message = f"Upstream request failed: {url}"
        super().__init__(message)


class UpstreamTimeoutError(FetchError):
    """An upstream request ran past its timeout."""

    def __init__(self, url: str, timeout: float | None = None):
        self.timeout = timeout
        detail = f" after {timeout:g}s" if timeout is not None else ""
        super().__init__(url, None, f"Upstream request timed out{detail}: {url}")


class StorageError(NCERTError):
    """Reading or writing the on-disk cache failed."""


class ParseError(NCERTError):
    """A byte buffer could not be decoded as a PDF."""


class ValidationError(NCERTError):
    """A request is missing or has malformed parameters."""


class ForbiddenError(NCERTError):
    """A request targets something this service refuses to touch."""


class GenerationError(NCERTError):
    """The language model could not produce a response."""

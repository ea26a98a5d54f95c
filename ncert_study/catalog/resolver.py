"""
Catalog Resolver - Finds the right NCERT book for a loose query.

The live catalog is tried first when one is configured; the bundled static
dataset answers everything else. A failing live catalog is logged and
treated as unavailable, so a lookup never fails because of it.

Resolution order for resolve_book():
1. "static-..." book ids go straight to the static dataset
2. The live catalog, if present (language is retried as a soft filter)
3. The static dataset on live miss or live failure
"""

from ncert_study.catalog.models import (
    SOURCE_CATALOG,
    BookQuery,
    BookResponse,
    ChapterRecord,
    LibraryOptions,
)
from ncert_study.catalog.sources import CatalogSource, ChromaCatalogSource, StaticCatalogSource
from ncert_study.catalog.store import CatalogClient, is_catalog_configured
from ncert_study.logger import get_logger

logger = get_logger(__name__)


class CatalogResolver:
    """
    Two-tier book lookup.

    Example:
        resolver = CatalogResolver.from_config()
        result = resolver.resolve_book(BookQuery(class_name="10", subject="Math"))
        if result:
            print(result.book.title, len(result.chapters))
    """

    def __init__(
        self,
        live: CatalogSource | None = None,
        static: StaticCatalogSource | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            live: Live catalog source (None = static dataset only)
            static: Static source (defaults to the bundled dataset)
        """
        self.live = live
        self.static = static or StaticCatalogSource()

    @classmethod
    def from_config(cls, client: CatalogClient | None = None) -> "CatalogResolver":
        """
        Build a resolver from the environment.

        When a live catalog is configured but cannot be opened the resolver
        falls back to the static dataset and logs why.
        """
        if client is None and is_catalog_configured():
            try:
                client = CatalogClient.from_config()
            except Exception as e:
                logger.error("Live catalog unavailable, using static dataset: %s", e)
        live = ChromaCatalogSource(client) if client is not None else None
        return cls(live=live)

    @property
    def active_source(self) -> str:
        return self.live.name if self.live else self.static.name

    def resolve_book(self, query: BookQuery) -> BookResponse | None:
        """
        Return the matching book and its chapters, or None.

        "Not found" is a normal outcome, not an error. Live catalog failures
        are logged and answered from the static dataset.
        """
        if StaticCatalogSource.is_static_id(query.book_id):
            return self.static.resolve_book(query)

        if self.live is not None:
            try:
                result = self.live.resolve_book(query)
                if result is not None:
                    return result
                logger.debug("Live catalog has no match for %s", query.describe())
            except Exception as e:
                logger.error("Live catalog lookup failed for %s: %s", query.describe(), e)

        return self.static.resolve_book(query)

    def get_chapter_text(self, chapter: ChapterRecord) -> str | None:
        """
        Return text the live catalog stored for a chapter, or None.

        Static chapters never have stored text. Live failures are logged and
        read as "no stored text".
        """
        if chapter.source != SOURCE_CATALOG or self.live is None:
            return None
        try:
            return self.live.chapter_text(chapter)
        except Exception as e:
            logger.error("Failed to read stored text for %s: %s", chapter.id, e)
            return None

    def get_library_options(self) -> LibraryOptions:
        """
        Enumerate known books for selection UIs.

        Falls back to the static dataset when the live catalog is missing,
        empty or failing. Never raises.
        """
        if self.live is not None:
            try:
                options = self.live.list_options()
                if options.classes:
                    return options
                logger.warning("Live catalog is empty, listing static dataset")
            except Exception as e:
                logger.error("Failed to load library options from live catalog: %s", e)
        return self.static.list_options()

"""
Catalog sources.

A CatalogSource answers two questions: "which book does this query mean?"
and "what books exist?". There are two implementations:

- StaticCatalogSource reads the bundled dataset in static_books.py
- ChromaCatalogSource reads the live catalog through a CatalogClient

The CatalogResolver (resolver.py) decides which one to ask.
"""

from abc import ABC, abstractmethod

from ncert_study.catalog.models import (
    SOURCE_CATALOG,
    SOURCE_STATIC,
    BookQuery,
    BookRecord,
    BookResponse,
    ChapterRecord,
    LibraryOptions,
    build_options,
)
from ncert_study.catalog.static_books import NCERT_BOOKS
from ncert_study.catalog.store import CatalogClient
from ncert_study.catalog.subjects import resolve_subject_group, slugify, title_case
from ncert_study.logger import get_logger

logger = get_logger(__name__)

STATIC_BOOK_PREFIX = "static-"


class CatalogSource(ABC):
    """Where book and chapter records come from."""

    name: str

    @abstractmethod
    def resolve_book(self, query: BookQuery) -> BookResponse | None:
        """Return the best book for the query with its chapters, or None."""

    @abstractmethod
    def list_options(self) -> LibraryOptions:
        """Enumerate every class -> subject -> book combination."""

    def chapter_text(self, chapter: ChapterRecord) -> str | None:
        """Text kept alongside a chapter record, if this source stores any."""
        return None


# =============================================================================
# STATIC DATASET
# =============================================================================


class StaticCatalogSource(CatalogSource):
    """
    The bundled book list.

    Every book is English and (class, subject) is unique, so a lookup is a
    linear scan on class and canonical subject group.
    """

    name = SOURCE_STATIC

    def __init__(self, books: list[dict] | None = None):
        self.books = NCERT_BOOKS if books is None else books

    @staticmethod
    def is_static_id(book_id: str | None) -> bool:
        return bool(book_id) and book_id.startswith(STATIC_BOOK_PREFIX)

    def _book_record(self, book: dict) -> BookRecord:
        return BookRecord(
            id=f"{STATIC_BOOK_PREFIX}{book['id']}",
            class_name=book["class"],
            subject=title_case(book["subject"]),
            subject_group=resolve_subject_group(book["subject"]),
            subject_key=slugify(book["subject"]),
            language="English",
            language_key="english",
            title=book["title"],
            chapter_count=len(book["chapters"]),
            source=SOURCE_STATIC,
        )

    def _chapter_record(self, book: dict, chapter: dict) -> ChapterRecord:
        return ChapterRecord(
            id=f"{STATIC_BOOK_PREFIX}{book['id']}-ch-{chapter['number']}",
            number=chapter["number"],
            title=chapter["name"],
            pdf_url=chapter["pdf_url"],
            original_pdf_url=chapter["pdf_url"],
            source=SOURCE_STATIC,
        )

    def _matches(self, book: dict, query: BookQuery) -> bool:
        if book["class"] != query.class_name:
            return False
        if query.subject_key and slugify(book["subject"]) == query.subject_key:
            return True
        book_group = resolve_subject_group(book["subject"])
        wanted = [value for value in (query.subject, query.subject_group) if value]
        return any(
            value == book["subject"] or resolve_subject_group(value) == book_group
            for value in wanted
        )

    def find(self, query: BookQuery) -> dict | None:
        if self.is_static_id(query.book_id):
            raw_id = query.book_id[len(STATIC_BOOK_PREFIX):]
            return next((b for b in self.books if b["id"] == raw_id), None)
        if query.class_name and (query.subject or query.subject_group or query.subject_key):
            return next((b for b in self.books if self._matches(b, query)), None)
        return None

    def resolve_book(self, query: BookQuery) -> BookResponse | None:
        book = self.find(query)
        if book is None:
            return None
        chapters = sorted(
            (self._chapter_record(book, ch) for ch in book["chapters"]),
            key=lambda c: c.number,
        )
        return BookResponse(source=SOURCE_STATIC, book=self._book_record(book), chapters=chapters)

    def list_options(self) -> LibraryOptions:
        return build_options(SOURCE_STATIC, [self._book_record(b) for b in self.books])


# =============================================================================
# LIVE CATALOG
# =============================================================================


def _as_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def book_from_metadata(data: dict) -> BookRecord:
    """Build a BookRecord from a live catalog record, filling derived fields."""
    subject = data.get("subject") or ""
    language = data.get("language") or "English"
    return BookRecord(
        id=data["id"],
        class_name=str(data.get("class", "")),
        subject=subject,
        subject_group=data.get("subjectGroup") or resolve_subject_group(subject),
        subject_key=data.get("subjectKey") or slugify(subject),
        language=language,
        language_key=data.get("languageKey") or slugify(language),
        title=data.get("bookTitle") or data.get("title") or subject,
        chapter_count=_as_int(data.get("chapterCount")) or 0,
        code=data.get("code"),
        priority=_as_int(data.get("priority")),
        source=SOURCE_CATALOG,
    )


def chapter_from_metadata(book_id: str, data: dict) -> ChapterRecord | None:
    """
    Build a ChapterRecord from a live catalog record.

    Records without a usable number or PDF location are skipped (None);
    scraping may have failed part way through a book.
    """
    number = _as_int(data.get("number"))
    if not number:
        return None

    pdf_url = data.get("storageDownloadUrl") or data.get("originalPdfUrl") or data.get("pdfUrl")
    if not pdf_url:
        return None

    title = (
        data.get("title")
        or data.get("derivedTitle")
        or data.get("defaultTitle")
        or f"Chapter {number:02d}"
    )
    return ChapterRecord(
        id=f"{book_id}-ch-{number:02d}",
        number=number,
        title=title,
        pdf_url=pdf_url,
        original_pdf_url=data.get("originalPdfUrl") or pdf_url,
        derived_title=data.get("derivedTitle"),
        text_url=data.get("textDownloadUrl") or data.get("textUrl"),
        text_preview=data.get("textPreview"),
        size_bytes=_as_int(data.get("sizeBytes")),
        source=SOURCE_CATALOG,
    )


class ChromaCatalogSource(CatalogSource):
    """
    Reads the scraped catalog from ChromaDB.

    Errors from the client propagate; the resolver decides what to do
    with them.
    """

    name = SOURCE_CATALOG

    def __init__(self, client: CatalogClient):
        self.client = client

    def _with_chapters(self, data: dict) -> BookResponse:
        book = book_from_metadata(data)
        chapters = [
            chapter
            for chapter in (chapter_from_metadata(book.id, c) for c in self.client.get_chapters(book.id))
            if chapter is not None
        ]
        chapters.sort(key=lambda c: c.number)
        return BookResponse(source=SOURCE_CATALOG, book=book, chapters=chapters)

    @staticmethod
    def _filters(query: BookQuery) -> dict[str, str]:
        filters = {"class": query.class_name}
        # Most specific subject field wins
        if query.subject_key:
            filters["subjectKey"] = query.subject_key
        elif query.subject_group:
            filters["subjectGroup"] = query.subject_group
        elif query.subject:
            filters["subject"] = query.subject

        if query.language_key:
            filters["languageKey"] = query.language_key
        elif query.language:
            filters["language"] = query.language
        return filters

    def resolve_book(self, query: BookQuery) -> BookResponse | None:
        if query.book_id:
            data = self.client.get_book(query.book_id)
            return self._with_chapters(data) if data else None

        if not query.class_name:
            return None

        candidates = self.client.find_books(self._filters(query))
        if not candidates and query.has_language:
            # Language is a preference: fall back to any edition
            logger.info(
                "No %s edition for %s, ignoring language",
                query.language_key or query.language,
                query.describe(),
            )
            return self.resolve_book(query.without_language())
        if not candidates:
            return None

        best = min(candidates, key=lambda d: book_from_metadata(d).sort_key)
        return self._with_chapters(best)

    def list_options(self) -> LibraryOptions:
        books = [book_from_metadata(d) for d in self.client.list_books()]
        return build_options(SOURCE_CATALOG, books)

    def chapter_text(self, chapter: ChapterRecord) -> str | None:
        return self.client.get_chapter_text(chapter.id)

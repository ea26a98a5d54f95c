"""
Catalog Scraper - Fills the live catalog from the NCERT textbook site.

The textbook index page (textbook.php) has no API; its book list lives in a
big JavaScript if/else chain of the form:

    else if((document.test.tclass.value==10) &&
            (document.test.tsubject.options[sind].text=="Mathematics")) {
        document.test.tbook.options[1].text="Mathematics";
        document.test.tbook.options[1].value="textbook.php?jemh1=0-14";
        ...
    }

parse_book_listings() turns that into BookListing objects. CatalogScraper then
downloads every chapter PDF, keeps it in the PDF cache, extracts its text
(stored as the chapter document), a preview and a title, and upserts book
and chapter records into ChromaDB.

Batch job only: run it through scripts/scrape_ncert.py.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ncert_study.catalog.store import CatalogClient
from ncert_study.catalog.subjects import (
    build_book_doc_id,
    detect_language,
    resolve_subject_group,
    slugify,
)
from ncert_study.config import (
    DEFAULT_LANGUAGE_PRIORITY,
    INDEX_FETCH_TIMEOUT,
    LANGUAGE_PRIORITY,
    PDF_BASE_URL,
    SCRAPE_BOOK_DELAY,
    SCRAPE_CLASSES,
    SCRAPE_LANGUAGES,
    SCRAPE_MAX_CHARS,
    SCRAPE_MAX_PAGES,
    SCRAPE_PDF_TIMEOUT,
    SCRAPE_SUBJECTS,
    TEXT_PREVIEW_CHARS,
    TEXTBOOK_PAGE_URL,
)
from ncert_study.embeddings.embedder import Embedder
from ncert_study.errors import NCERTError
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.ingestion.pdf_parser import derive_title, extract_text
from ncert_study.logger import get_logger

logger = get_logger(__name__)

_SUBJECT_BLOCK = re.compile(
    r"else if\(\(document\.test\.tclass\.value==(.*?)\)\s*&&\s*"
    r"\(document\.test\.tsubject\.options\[sind\]\.text==\"([^\"]+)\"\)\)\s*\{"
    r"([\s\S]*?)(?=\}\s*else if|\}\s*function|$)"
)
_BOOK_OPTION = re.compile(
    r"document\.test\.tbook\.options\[(\d+)\]\.text=\"([^\"]+)\"[\s;]*"
    r"document\.test\.tbook\.options\[\1\]\.value=\"textbook\.php\?([^\"]+)\""
)
_CHAPTER_RANGE = re.compile(r"(\d+)-(\d+)")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class BookListing:
    """One textbook edition as listed on the index page."""

    class_name: str
    subject: str
    subject_key: str
    subject_group: str
    title: str
    code: str
    raw_value: str
    chapter_count: int
    source_url: str
    language: str
    language_key: str
    priority: int

    @property
    def book_id(self) -> str:
        return build_book_doc_id(self.class_name, self.subject_key, self.language_key, self.code)

    def chapter_pdf_url(self, number: int) -> str:
        return f"{PDF_BASE_URL}/{self.code}{number:02d}.pdf"

    def metadata(self) -> dict:
        return {
            "class": self.class_name,
            "subject": self.subject,
            "subjectGroup": self.subject_group,
            "subjectKey": self.subject_key,
            "language": self.language,
            "languageKey": self.language_key,
            "bookTitle": self.title,
            "code": self.code,
            "chapterCount": self.chapter_count,
            "sourceValue": self.raw_value,
            "sourceUrl": self.source_url,
            "priority": self.priority,
        }


@dataclass
class ScrapeStats:
    books: int = 0
    chapters: int = 0
    failures: list[str] = field(default_factory=list)


def parse_book_listings(
    html: str,
    classes: set[str] | None = None,
    subjects: set[str] | None = None,
    languages: set[str] | None = None,
) -> list[BookListing]:
    """
    Extract book entries from the textbook index page.

    Args:
        html: The page source
        classes: Class labels to keep (defaults to SCRAPE_CLASSES)
        subjects: Lowercase subject names to keep (empty = all)
        languages: Language keys to keep, e.g. {"english"} (empty = all)

    Returns:
        BookListings in page order. Placeholder options ("..Select ...") and
        entries without a usable chapter range are skipped.
    """
    classes = SCRAPE_CLASSES if classes is None else classes
    subjects = SCRAPE_SUBJECTS if subjects is None else subjects
    languages = SCRAPE_LANGUAGES if languages is None else languages

    listings = []
    for block in _SUBJECT_BLOCK.finditer(html):
        class_name = block.group(1).strip()
        subject = block.group(2).strip()

        if class_name not in classes:
            continue
        if subjects and subject.lower() not in subjects:
            continue

        for option in _BOOK_OPTION.finditer(block.group(3)):
            title = option.group(2).strip()
            raw_value = option.group(3).strip()
            if not title or title.startswith("..Select"):
                continue

            code, _, chapter_range = raw_value.partition("=")
            if not code or not chapter_range:
                continue
            range_match = _CHAPTER_RANGE.search(chapter_range)
            if not range_match:
                continue
            chapter_count = int(range_match.group(2))
            if not chapter_count:
                continue

            language = detect_language(code, subject, title)
            language_key = slugify(language)
            if languages and language_key not in languages:
                continue

            listings.append(
                BookListing(
                    class_name=class_name,
                    subject=subject,
                    subject_key=slugify(subject),
                    subject_group=resolve_subject_group(subject),
                    title=title,
                    code=code,
                    raw_value=raw_value,
                    chapter_count=chapter_count,
                    source_url=f"https://ncert.nic.in/textbook.php?{raw_value}",
                    language=language,
                    language_key=language_key,
                    priority=LANGUAGE_PRIORITY.get(language_key, DEFAULT_LANGUAGE_PRIORITY),
                )
            )

    return listings


class CatalogScraper:
    """
    Downloads every listed chapter and records it in the live catalog.

    Example:
        scraper = CatalogScraper(CatalogClient.from_config(), Fetcher(), PdfCache(), Embedder())
        stats = scraper.run()
        print(stats.books, stats.chapters, len(stats.failures))
    """

    def __init__(
        self,
        catalog: CatalogClient,
        fetcher: Fetcher,
        cache: PdfCache,
        embedder: Embedder,
        book_delay: float | None = None,
    ):
        self.catalog = catalog
        self.fetcher = fetcher
        self.cache = cache
        self.embedder = embedder
        self.book_delay = SCRAPE_BOOK_DELAY if book_delay is None else book_delay

    def fetch_listings(self, **filters) -> list[BookListing]:
        logger.info("Fetching NCERT textbook index: %s", TEXTBOOK_PAGE_URL)
        html = self.fetcher.fetch_text(TEXTBOOK_PAGE_URL, timeout=INDEX_FETCH_TIMEOUT)
        return parse_book_listings(html, **filters)

    def process_chapter(self, book: BookListing, number: int) -> None:
        """
        Download, cache, read and record one chapter.

        Raises:
            NCERTError: If the PDF cannot be downloaded, stored or parsed
        """
        pdf_url = book.chapter_pdf_url(number)
        logger.info("Chapter %d: downloading %s", number, pdf_url)

        data = self.fetcher.fetch_bytes(pdf_url, timeout=SCRAPE_PDF_TIMEOUT)
        self.cache.put(pdf_url, data)

        text = extract_text(data, max_pages=SCRAPE_MAX_PAGES, max_chars=SCRAPE_MAX_CHARS)
        default_title = f"Chapter {number}"
        derived_title = derive_title(text, default=default_title)
        preview = _WHITESPACE.sub(" ", text).strip()[:TEXT_PREVIEW_CHARS]

        metadata = {
            "bookId": book.book_id,
            "number": number,
            "title": derived_title,
            "derivedTitle": derived_title,
            "defaultTitle": default_title,
            "originalPdfUrl": pdf_url,
            "pdfSha256": hashlib.sha256(data).hexdigest(),
            "sizeBytes": len(data),
            "textPreview": preview or None,
            "hasText": bool(text),
            "wordCount": len(text.split()),
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        self.catalog.upsert_chapter(
            chapter_id=f"{book.book_id}-ch-{number:02d}",
            metadata=metadata,
            document=text or derived_title,
            embedding=self.embedder.embed(preview or derived_title),
        )

    def process_book(self, book: BookListing, stats: ScrapeStats) -> None:
        logger.info(
            "%s | %s (%s) - %s [%d chapters]",
            book.class_name,
            book.subject,
            book.language,
            book.title,
            book.chapter_count,
        )
        self.catalog.upsert_book(
            book_id=book.book_id,
            metadata={**book.metadata(), "updatedAt": datetime.now(timezone.utc).isoformat()},
            document=book.title,
            embedding=self.embedder.embed(f"{book.subject} {book.title}"),
        )
        stats.books += 1

        for number in range(1, book.chapter_count + 1):
            try:
                self.process_chapter(book, number)
                stats.chapters += 1
            except NCERTError as e:
                logger.error("Failed to process chapter %d of %s: %s", number, book.title, e)
                stats.failures.append(book.chapter_pdf_url(number))

    def run(self, listings: list[BookListing] | None = None) -> ScrapeStats:
        """
        Scrape every book (from the live index unless listings are given).

        Chapter failures are logged and counted; the run continues.
        """
        if listings is None:
            listings = self.fetch_listings()

        stats = ScrapeStats()
        if not listings:
            logger.warning("No NCERT book entries found. Check filters or website structure.")
            return stats

        logger.info("Found %d textbook entries", len(listings))
        for i, book in enumerate(listings):
            self.process_book(book, stats)
            if self.book_delay > 0 and i < len(listings) - 1:
                time.sleep(self.book_delay)

        logger.info(
            "Scrape finished: %d books, %d chapters, %d failures",
            stats.books,
            stats.chapters,
            len(stats.failures),
        )
        return stats

"""
Topic-to-Text Pipeline - Textbook text for a free-text study topic.

Steps:
1. Resolve the class/subject to a book (English edition preferred)
2. Pick the chapter that best fits the topic
3. Get the chapter text: text the scraper stored in the live catalog, then
   a pre-extracted text file when the record names one, otherwise the
   chapter PDF (cached on disk) run through the extractor

Every failure along the way is logged and turns into "no textbook text";
summary generation carries on without it.
"""

from dataclasses import dataclass

from ncert_study.catalog.models import BookQuery, BookRecord, ChapterRecord
from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.subjects import resolve_subject_group
from ncert_study.config import EXTRACT_MAX_CHARS, EXTRACT_MAX_PAGES, TEXT_FETCH_TIMEOUT
from ncert_study.errors import NCERTError
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.ingestion.pdf_parser import extract_text
from ncert_study.logger import get_logger
from ncert_study.study.topic_matcher import best_match

logger = get_logger(__name__)


@dataclass
class TopicText:
    """
    Textbook grounding for a topic.

    Attributes:
        book: The resolved book
        chapter: The chapter that best matched the topic
        text: Chapter text (bounded for prompt use)
        score: Topic match score in [0, 1]; 0 means the fallback chapter
    """

    book: BookRecord
    chapter: ChapterRecord
    text: str
    score: float

    @property
    def label(self) -> str:
        return f"{self.chapter.title} (Chapter {self.chapter.number})"


class TopicTextPipeline:
    """
    Composes the resolver, topic matcher, PDF cache and extractor.

    Example:
        pipeline = TopicTextPipeline(resolver, PdfCache(), Fetcher())
        result = pipeline.get_text_for_topic("10", "Science", "acids and bases")
        if result:
            print(result.label, result.text[:200])
    """

    def __init__(
        self,
        resolver: CatalogResolver,
        cache: PdfCache,
        fetcher: Fetcher,
        max_pages: int | None = None,
        max_chars: int | None = None,
    ):
        self.resolver = resolver
        self.cache = cache
        self.fetcher = fetcher
        self.max_pages = max_pages or EXTRACT_MAX_PAGES
        self.max_chars = max_chars or EXTRACT_MAX_CHARS

    def _text_from_url(self, chapter: ChapterRecord) -> str:
        try:
            return self.fetcher.fetch_text(chapter.text_url, timeout=TEXT_FETCH_TIMEOUT).strip()
        except NCERTError as e:
            logger.warning("Pre-extracted text unavailable for %s: %s", chapter.text_url, e)
            return ""

    def _text_from_pdf(self, chapter: ChapterRecord) -> str:
        try:
            data = self.cache.get_or_fetch(chapter.pdf_url, self.fetcher)
            return extract_text(data, max_pages=self.max_pages, max_chars=self.max_chars)
        except NCERTError as e:
            logger.error("Failed to read NCERT PDF %s: %s", chapter.pdf_url, e)
            return ""

    def chapter_text(self, chapter: ChapterRecord) -> str:
        """Return a chapter's text from the best available source ("" if none)."""
        stored = self.resolver.get_chapter_text(chapter)
        if stored and stored.strip():
            return stored.strip()[: self.max_chars]
        if chapter.text_url:
            text = self._text_from_url(chapter)
            if text:
                return text
        return self._text_from_pdf(chapter)

    def get_text_for_topic(self, class_name: str, subject_group: str, topic: str) -> TopicText | None:
        """
        Find the textbook text most relevant to a topic.

        Args:
            class_name: Class label, e.g. "10"
            subject_group: Subject name or group ("Math", "maths", "History", ...)
            topic: What the student wants to study

        Returns:
            TopicText, or None when no book, chapter or text is available
        """
        query = BookQuery(
            class_name=class_name,
            subject_group=resolve_subject_group(subject_group),
            language="English",
        )
        result = self.resolver.resolve_book(query)
        if result is None:
            logger.info("No NCERT book for %s", query.describe())
            return None

        match = best_match(result.chapters, topic)
        if match is None:
            logger.info("Book %s has no chapters", result.book.id)
            return None

        logger.info(
            "Topic %r -> %s chapter %d %r (score %.2f)",
            topic,
            result.book.id,
            match.chapter.number,
            match.chapter.title,
            match.score,
        )

        text = self.chapter_text(match.chapter)
        if not text:
            return None

        return TopicText(book=result.book, chapter=match.chapter, text=text, score=match.score)

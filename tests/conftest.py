"""Shared fixtures for the NCERT Study Library test suite."""

import fitz
import httpx
import pytest
from fastapi.testclient import TestClient

from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.sources import ChromaCatalogSource
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.study.pipeline import TopicTextPipeline
from ncert_study.study.summary import StudySummarizer

# ---------------------------------------------------------------------------
# PDFs built on the fly with PyMuPDF
# ---------------------------------------------------------------------------


def make_pdf(*pages: str) -> bytes:
    """Build a PDF with one page per string (each line drawn separately)."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        y = 72
        for line in text.splitlines():
            page.insert_text((72, y), line)
            y += 18
    data = doc.tobytes()
    doc.close()
    return data


REAL_NUMBERS_PDF = make_pdf("Chapter 1 Real Numbers\nEuclid's division lemma states a = bq + r.")

# ---------------------------------------------------------------------------
# Fake upstream (ncert.nic.in) behind an httpx.MockTransport
# ---------------------------------------------------------------------------


class FakeUpstream:
    """Serves canned responses by URL and records every request."""

    def __init__(self):
        self.responses: dict[str, tuple[int, bytes]] = {}
        self.errors: dict[str, Exception] = {}
        self.requests: list[str] = []

    def add(self, url: str, content: bytes | str = b"", status_code: int = 200):
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.responses[url] = (status_code, content)

    def fail(self, url: str, error: Exception):
        self.errors[url] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url in self.responses:
            status_code, content = self.responses[url]
            return httpx.Response(status_code, content=content)
        return httpx.Response(404, content=b"not found")

    def count(self, url: str) -> int:
        return self.requests.count(url)


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest.fixture()
def fetcher(upstream):
    client = httpx.Client(transport=httpx.MockTransport(upstream.handler))
    yield Fetcher(client=client)
    client.close()


@pytest.fixture()
def cache(tmp_path):
    return PdfCache(tmp_path / "ncert-cache")


# ---------------------------------------------------------------------------
# Fake live catalog that never touches ChromaDB
# ---------------------------------------------------------------------------


class FakeCatalogClient:
    """In-memory stand-in for CatalogClient's read API."""

    def __init__(
        self,
        books: list[dict] | None = None,
        chapters: dict[str, list[dict]] | None = None,
        texts: dict[str, str] | None = None,
    ):
        self.books = books or []
        self.chapters = chapters or {}
        self.texts = texts or {}
        self.queries: list[dict] = []

    def get_book(self, book_id: str) -> dict | None:
        return next((dict(b) for b in self.books if b["id"] == book_id), None)

    def find_books(self, filters: dict) -> list[dict]:
        self.queries.append(dict(filters))
        return [
            dict(b)
            for b in self.books
            if all(b.get(key) == value for key, value in filters.items())
        ]

    def list_books(self) -> list[dict]:
        return [dict(b) for b in self.books]

    def get_chapters(self, book_id: str) -> list[dict]:
        return sorted(self.chapters.get(book_id, []), key=lambda c: c["number"])

    def get_chapter_text(self, chapter_id: str) -> str | None:
        return self.texts.get(chapter_id)


class BrokenCatalogClient:
    """Live catalog whose every call fails."""

    def get_book(self, book_id):
        raise ConnectionError("catalog unreachable")

    def find_books(self, filters):
        raise ConnectionError("catalog unreachable")

    def list_books(self):
        raise ConnectionError("catalog unreachable")

    def get_chapters(self, book_id):
        raise ConnectionError("catalog unreachable")

    def get_chapter_text(self, chapter_id):
        raise ConnectionError("catalog unreachable")


LIVE_MATH_ENGLISH = {
    "id": "class-10_mathematics_english_jemh1",
    "class": "10",
    "subject": "Mathematics",
    "subjectGroup": "Math",
    "subjectKey": "mathematics",
    "language": "English",
    "languageKey": "english",
    "bookTitle": "Mathematics",
    "code": "jemh1",
    "chapterCount": 2,
    "priority": 0,
}

LIVE_MATH_HINDI = {
    "id": "class-10_mathematics_hindi_jhmh1",
    "class": "10",
    "subject": "Mathematics",
    "subjectGroup": "Math",
    "subjectKey": "mathematics",
    "language": "Hindi",
    "languageKey": "hindi",
    "bookTitle": "Ganit",
    "code": "jhmh1",
    "chapterCount": 1,
    "priority": 1,
}

LIVE_CHAPTERS = {
    LIVE_MATH_ENGLISH["id"]: [
        {
            "bookId": LIVE_MATH_ENGLISH["id"],
            "number": 2,
            "title": "Polynomials",
            "originalPdfUrl": "https://ncert.nic.in/textbook/pdf/jemh102.pdf",
        },
        {
            "bookId": LIVE_MATH_ENGLISH["id"],
            "number": 1,
            "title": "Real Numbers",
            "derivedTitle": "Real Numbers",
            "originalPdfUrl": "https://ncert.nic.in/textbook/pdf/jemh101.pdf",
            "textPreview": "Real Numbers. Euclid's division lemma",
            "sizeBytes": 1024,
        },
    ],
    LIVE_MATH_HINDI["id"]: [
        {
            "bookId": LIVE_MATH_HINDI["id"],
            "number": 1,
            "title": "Vastavik Sankhyayen",
            "originalPdfUrl": "https://ncert.nic.in/textbook/pdf/jhmh101.pdf",
        },
    ],
}


@pytest.fixture()
def live_client():
    return FakeCatalogClient(books=[LIVE_MATH_ENGLISH, LIVE_MATH_HINDI], chapters=LIVE_CHAPTERS)


@pytest.fixture()
def static_resolver():
    """Resolver with no live catalog (bundled dataset only)."""
    return CatalogResolver()


@pytest.fixture()
def live_resolver(live_client):
    return CatalogResolver(live=ChromaCatalogSource(live_client))


# ---------------------------------------------------------------------------
# Fake Ollama client
# ---------------------------------------------------------------------------


class FakeOllamaClient:
    """Returns canned replies in order and records every prompt."""

    def __init__(self, replies: list[str] | None = None, error: Exception | None = None):
        self.replies = list(replies or ["Study Summary: Real Numbers\n\n## Key Concepts\n- Euclid"])
        self.error = error
        self.prompts: list[str] = []

    def chat(self, model, messages, **_):
        self.prompts.append(messages[-1]["content"])
        if self.error is not None:
            raise self.error
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return {"message": {"content": reply}}


@pytest.fixture()
def pipeline(static_resolver, cache, fetcher):
    return TopicTextPipeline(static_resolver, cache, fetcher)


@pytest.fixture()
def ollama_client():
    return FakeOllamaClient()


@pytest.fixture()
def summarizer(pipeline, static_resolver, ollama_client):
    return StudySummarizer(pipeline, static_resolver, model="fake-model", client=ollama_client)


# ---------------------------------------------------------------------------
# HTTP app
# ---------------------------------------------------------------------------


@pytest.fixture()
def test_client(static_resolver, cache, fetcher, summarizer):
    """
    TestClient over the bundled catalog.

    Upstream downloads go to the FakeUpstream, the PDF cache lives in
    tmp_path and Ollama is replaced, so nothing leaves the process.
    """
    from ncert_study.interfaces.web_app import create_app

    app = create_app(resolver=static_resolver, cache=cache, fetcher=fetcher, summarizer=summarizer)
    return TestClient(app)

"""Tests for the ChromaDB-backed catalog store."""

import pytest

from ncert_study.catalog import store as store_module
from ncert_study.catalog.models import BookQuery
from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.sources import ChromaCatalogSource
from ncert_study.catalog.store import CatalogClient, build_where
from ncert_study.errors import NotConfiguredError

EMBEDDING = [0.1, 0.2, 0.3]


@pytest.fixture()
def catalog(tmp_path):
    client = CatalogClient.from_config(persist_directory=tmp_path / "catalog")
    client.upsert_book(
        "class-10_science_english_jesc1",
        {
            "class": "10",
            "subject": "Science",
            "subjectGroup": "Science",
            "subjectKey": "science",
            "language": "English",
            "languageKey": "english",
            "bookTitle": "Science",
            "code": "jesc1",
            "chapterCount": 2,
            "priority": 0,
        },
        "Science",
        EMBEDDING,
    )
    client.upsert_book(
        "class-10_science_hindi_jhsc1",
        {
            "class": "10",
            "subject": "Science",
            "subjectGroup": "Science",
            "subjectKey": "science",
            "language": "Hindi",
            "languageKey": "hindi",
            "bookTitle": "Vigyan",
            "code": "jhsc1",
            "chapterCount": 1,
            "priority": 1,
        },
        "Vigyan",
        EMBEDDING,
    )
    for number, title in ((2, "Acids, Bases and Salts"), (1, "Chemical Reactions and Equations")):
        client.upsert_chapter(
            f"class-10_science_english_jesc1-ch-{number:02d}",
            {
                "bookId": "class-10_science_english_jesc1",
                "number": number,
                "title": title,
                "originalPdfUrl": f"https://ncert.nic.in/textbook/pdf/jesc1{number:02d}.pdf",
                "textUrl": None,
            },
            title,
            EMBEDDING,
        )
    return client


class TestBuildWhere:
    def test_empty(self):
        assert build_where({}) is None

    def test_single(self):
        assert build_where({"class": "10"}) == {"class": "10"}

    def test_several_use_and(self):
        assert build_where({"class": "10", "subjectKey": "science", "languageKey": None}) == {
            "$and": [{"class": "10"}, {"subjectKey": "science"}]
        }


class TestCatalogClient:
    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(store_module, "CATALOG_HOST", None)
        monkeypatch.setattr(store_module, "CATALOG_DIR", None)
        with pytest.raises(NotConfiguredError):
            CatalogClient.from_config()

    def test_get_book(self, catalog):
        book = catalog.get_book("class-10_science_english_jesc1")
        assert book["id"] == "class-10_science_english_jesc1"
        assert book["bookTitle"] == "Science"
        assert catalog.get_book("missing") is None

    def test_find_books(self, catalog):
        assert len(catalog.find_books({"class": "10", "subjectKey": "science"})) == 2
        hindi = catalog.find_books({"class": "10", "languageKey": "hindi"})
        assert [b["id"] for b in hindi] == ["class-10_science_hindi_jhsc1"]
        assert catalog.find_books({"class": "9"}) == []

    def test_list_books(self, catalog):
        assert catalog.book_count == 2
        assert len(catalog.list_books()) == 2

    def test_chapters_sorted_and_none_dropped(self, catalog):
        chapters = catalog.get_chapters("class-10_science_english_jesc1")
        assert [c["number"] for c in chapters] == [1, 2]
        assert "textUrl" not in chapters[0]

    def test_chapter_text(self, catalog):
        catalog.upsert_chapter(
            "class-10_science_english_jesc1-ch-03",
            {
                "bookId": "class-10_science_english_jesc1",
                "number": 3,
                "title": "Metals and Non-metals",
                "originalPdfUrl": "https://ncert.nic.in/textbook/pdf/jesc103.pdf",
                "hasText": True,
            },
            "Chapter 3 Metals and Non-metals\nPhysical properties of metals",
            EMBEDDING,
        )

        assert catalog.get_chapter_text("class-10_science_english_jesc1-ch-03").startswith("Chapter 3 Metals")
        # Documents written without hasText only hold the title
        assert catalog.get_chapter_text("class-10_science_english_jesc1-ch-01") is None
        assert catalog.get_chapter_text("missing") is None


class TestChromaResolver:
    def test_resolves_through_chroma(self, catalog):
        resolver = CatalogResolver(live=ChromaCatalogSource(catalog))
        result = resolver.resolve_book(BookQuery(class_name="10", subject_group="Science", language="English"))
        assert result.source == "catalog"
        assert result.book.id == "class-10_science_english_jesc1"
        assert [c.title for c in result.chapters] == [
            "Chemical Reactions and Equations",
            "Acids, Bases and Salts",
        ]

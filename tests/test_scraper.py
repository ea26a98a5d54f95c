"""Tests for the NCERT index parser and the catalog scraper."""

from ncert_study.catalog.scraper import CatalogScraper, parse_book_listings
from ncert_study.config import TEXTBOOK_PAGE_URL

from conftest import REAL_NUMBERS_PDF

INDEX_HTML = """
<script>
function change(sind) {
if(document.test.tclass.value==0) { }
else if((document.test.tclass.value==10) && (document.test.tsubject.options[sind].text=="Mathematics"))
{
document.test.tbook.options[0].text="..Select Book Title..";
document.test.tbook.options[1].text="Mathematics";
document.test.tbook.options[1].value="textbook.php?jemh1=0-2";
document.test.tbook.options[2].text="Ganit";
document.test.tbook.options[2].value="textbook.php?jhmh1=0-14";
}
else if((document.test.tclass.value==10) && (document.test.tsubject.options[sind].text=="Hindi"))
{
document.test.tbook.options[1].text="Kshitij";
document.test.tbook.options[1].value="textbook.php?jhks1=0-17";
}
else if((document.test.tclass.value==8) && (document.test.tsubject.options[sind].text=="Science"))
{
document.test.tbook.options[1].text="Science";
document.test.tbook.options[1].value="textbook.php?hesc1=0-13";
}
else if((document.test.tclass.value==10) && (document.test.tsubject.options[sind].text=="Broken"))
{
document.test.tbook.options[1].text="No Range";
document.test.tbook.options[1].value="textbook.php?jxxx1";
}
}
function other() {}
</script>
"""


class TestParseBookListings:
    def test_parses_books_for_target_classes(self):
        listings = parse_book_listings(INDEX_HTML, classes={"10"}, subjects=set(), languages=set())

        assert [(s.subject, s.code) for s in listings] == [
            ("Mathematics", "jemh1"),
            ("Mathematics", "jhmh1"),
            ("Hindi", "jhks1"),
        ]

    def test_book_fields(self):
        listing = parse_book_listings(INDEX_HTML, classes={"10"}, subjects=set(), languages=set())[0]

        assert listing.class_name == "10"
        assert listing.title == "Mathematics"
        assert listing.chapter_count == 2
        assert listing.subject_group == "Math"
        assert listing.subject_key == "mathematics"
        assert listing.language == "English"
        assert listing.priority == 0
        assert listing.raw_value == "jemh1=0-2"
        assert listing.source_url == "https://ncert.nic.in/textbook.php?jemh1=0-2"
        assert listing.book_id == "class-10_mathematics_english_jemh1"
        assert listing.chapter_pdf_url(2) == "https://ncert.nic.in/textbook/pdf/jemh102.pdf"

    def test_hindi_edition_priority(self):
        listings = parse_book_listings(INDEX_HTML, classes={"10"}, subjects={"mathematics"}, languages=set())
        hindi = listings[1]
        assert hindi.language == "Hindi"
        assert hindi.priority == 1

    def test_subject_and_language_filters(self):
        listings = parse_book_listings(INDEX_HTML, classes={"10"}, subjects={"mathematics"}, languages={"english"})
        assert [s.code for s in listings] == ["jemh1"]

    def test_class_filter(self):
        listings = parse_book_listings(INDEX_HTML, classes={"8"}, subjects=set(), languages=set())
        assert [s.code for s in listings] == ["hesc1"]


class FakeStore:
    def __init__(self):
        self.books = {}
        self.chapters = {}
        self.documents = {}

    def upsert_book(self, book_id, metadata, document, embedding):
        self.books[book_id] = metadata

    def upsert_chapter(self, chapter_id, metadata, document, embedding):
        self.chapters[chapter_id] = metadata
        self.documents[chapter_id] = document


class FakeEmbedder:
    def embed(self, text):
        return [0.1, 0.2, 0.3]


class TestCatalogScraper:
    def _scraper(self, fetcher, cache):
        self.store = FakeStore()
        return CatalogScraper(self.store, fetcher, cache, FakeEmbedder(), book_delay=0)

    def test_scrapes_books_and_chapters(self, fetcher, cache, upstream):
        upstream.add(TEXTBOOK_PAGE_URL, INDEX_HTML)
        upstream.add("https://ncert.nic.in/textbook/pdf/jemh101.pdf", REAL_NUMBERS_PDF)
        upstream.add("https://ncert.nic.in/textbook/pdf/jemh102.pdf", b"", status_code=404)

        scraper = self._scraper(fetcher, cache)
        listings = scraper.fetch_listings(classes={"10"}, subjects={"mathematics"}, languages={"english"})
        stats = scraper.run(listings)

        assert stats.books == 1
        assert stats.chapters == 1
        assert stats.failures == ["https://ncert.nic.in/textbook/pdf/jemh102.pdf"]

        book = self.store.books["class-10_mathematics_english_jemh1"]
        assert book["bookTitle"] == "Mathematics"
        assert book["priority"] == 0

        chapter = self.store.chapters["class-10_mathematics_english_jemh1-ch-01"]
        assert chapter["number"] == 1
        assert chapter["title"] == "Chapter 1 Real Numbers"
        assert chapter["defaultTitle"] == "Chapter 1"
        assert chapter["originalPdfUrl"] == "https://ncert.nic.in/textbook/pdf/jemh101.pdf"
        assert chapter["sizeBytes"] == len(REAL_NUMBERS_PDF)
        assert chapter["wordCount"] > 3
        assert chapter["textPreview"].startswith("Chapter 1 Real Numbers Euclid")
        assert len(chapter["pdfSha256"]) == 64
        assert chapter["hasText"] is True
        document = self.store.documents["class-10_mathematics_english_jemh1-ch-01"]
        assert document.startswith("Chapter 1 Real Numbers")
        assert "Euclid" in document

        assert cache.get("https://ncert.nic.in/textbook/pdf/jemh101.pdf") == REAL_NUMBERS_PDF

    def test_no_listings(self, fetcher, cache):
        stats = self._scraper(fetcher, cache).run([])
        assert stats.books == 0
        assert self.store.books == {}

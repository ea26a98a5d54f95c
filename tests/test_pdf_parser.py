"""Tests for PDF text extraction and chapter title derivation."""

import pytest

from ncert_study.errors import ParseError
from ncert_study.ingestion.pdf_parser import PDFParser, derive_title, extract_text, looks_like_pdf

from conftest import REAL_NUMBERS_PDF, make_pdf


class TestExtractText:
    def test_extracts_first_page_text(self):
        text = extract_text(REAL_NUMBERS_PDF)
        assert text.startswith("Chapter 1 Real Numbers")
        assert "Euclid" in text

    def test_title_end_to_end(self):
        assert derive_title(extract_text(REAL_NUMBERS_PDF)) == "Chapter 1 Real Numbers"

    def test_max_pages_limits_decoding(self):
        data = make_pdf("First page words", "Second page words", "Third page words")
        text = extract_text(data, max_pages=1)
        assert "First page" in text
        assert "Second page" not in text

    def test_max_chars_truncates(self):
        text = extract_text(REAL_NUMBERS_PDF, max_chars=9)
        assert text == "Chapter 1"

    def test_garbage_bytes_raise_parse_error(self):
        with pytest.raises(ParseError):
            extract_text(b"this is not a pdf at all")

    def test_empty_buffer_raises_parse_error(self):
        with pytest.raises(ParseError):
            extract_text(b"")

    def test_html_page_raises_parse_error(self):
        with pytest.raises(ParseError):
            extract_text(b"<html><body>Site under maintenance</body></html>")


class TestLooksLikePdf:
    def test_real_pdf(self):
        assert looks_like_pdf(REAL_NUMBERS_PDF)

    def test_html_and_empty(self):
        assert not looks_like_pdf(b"<html>maintenance</html>")
        assert not looks_like_pdf(b"")

    def test_header_must_be_near_the_start(self):
        assert not looks_like_pdf(b" " * 2048 + b"%PDF-1.4")


class TestPDFParser:
    def test_reports_total_pages(self):
        data = make_pdf("one", "two", "three")
        content = PDFParser().parse_bytes(data, max_pages=2)
        assert content.total_pages == 3
        assert [p.page_number for p in content.pages] == [1, 2]


class TestDeriveTitle:
    def test_prefers_chapter_line(self):
        text = "Introduction to the book\n3\nCHAPTER   2   Polynomials\nmore"
        assert derive_title(text) == "CHAPTER 2 Polynomials"

    def test_falls_back_to_heading_like_line(self):
        text = "12\n\nAcids, Bases and Salts\nshort"
        assert derive_title(text) == "Acids, Bases and Salts"

    def test_skips_short_and_numeric_lines(self):
        text = "123456789012\nShort one\nLong enough heading"
        assert derive_title(text) == "Long enough heading"

    def test_default_when_nothing_matches(self):
        assert derive_title("12\n\n  \n# 4") == "NCERT Chapter"

    def test_custom_default(self):
        assert derive_title("", default="Chapter 7") == "Chapter 7"

"""
PDF Parser - Extracts text and chapter titles from NCERT PDFs.

This module handles the extraction of text content from PDF byte buffers.
It uses pymupdf (fitz) which copes well with the scanned and typeset
textbook PDFs the publisher serves.

Key Concepts:
- Textbook chapters run to 40+ pages, so decoding is capped by page count
- Extracted text is trimmed to a character budget before it goes to an LLM
- Chapter titles are guessed from the first page; this is best-effort
- Images and diagrams are not extracted (text only)
"""

import re
from dataclasses import dataclass

import fitz  # pymupdf - the library is called 'fitz' historically

from ncert_study.errors import ParseError

DEFAULT_CHAPTER_TITLE = "NCERT Chapter"

# A PDF header may sit anywhere in the first kilobyte
PDF_MAGIC = b"%PDF-"
PDF_HEADER_WINDOW = 1024

_CHAPTER_LINE = re.compile(r"^chapter\s+\d+", re.IGNORECASE)
_HEADING_LINE = re.compile(r"^[A-Za-z]")


@dataclass
class PageContent:
    """
    Represents the content of a single PDF page.

    Attributes:
        page_number: 1-indexed page number
        text: Extracted text content
    """

    page_number: int
    text: str


@dataclass
class DocumentContent:
    """
    Represents the decoded part of a PDF document.

    Attributes:
        total_pages: Total number of pages in the file
        pages: PageContent for every decoded page
    """

    total_pages: int
    pages: list[PageContent]

    @property
    def full_text(self) -> str:
        return "\n".join(page.text for page in self.pages)


class PDFParser:
    """
    Parses PDF byte buffers.

    Example:
        parser = PDFParser()
        content = parser.parse_bytes(pdf_bytes, max_pages=6)
        print(content.full_text[:500])
    """

    def parse_bytes(self, data: bytes, max_pages: int | None = None) -> DocumentContent:
        """
        Decode a PDF and extract the text of its first pages.

        Args:
            data: Raw PDF bytes
            max_pages: Decode at most this many pages (None = all)

        Returns:
            DocumentContent with one PageContent per decoded page

        Raises:
            ParseError: If the buffer is not a readable PDF
        """
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ParseError(f"Failed to open PDF: {e}") from e

        try:
            # PyMuPDF sniffs the content and happily opens HTML or plain text
            if not doc.is_pdf:
                raise ParseError("Buffer is not a PDF document")

            total_pages = doc.page_count
            if total_pages == 0:
                raise ParseError("PDF has no pages")

            limit = total_pages if max_pages is None else min(max_pages, total_pages)
            pages = []
            for page_num in range(limit):
                try:
                    text = doc[page_num].get_text()
                except Exception as e:
                    raise ParseError(f"Failed to read page {page_num + 1}: {e}") from e
                pages.append(PageContent(page_number=page_num + 1, text=text))
        finally:
            doc.close()

        return DocumentContent(total_pages=total_pages, pages=pages)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def looks_like_pdf(data: bytes) -> bool:
    """Cheap header check, used before bytes are cached or served as a PDF."""
    return PDF_MAGIC in data[:PDF_HEADER_WINDOW]


def extract_text(
    data: bytes,
    max_pages: int | None = None,
    max_chars: int | None = None,
) -> str:
    """
    Extract plain text from a PDF byte buffer.

    Whitespace runs that end in a newline are collapsed to the newline and
    the result is trimmed. If max_chars is given the text is cut to that
    length (a plain slice, not word-boundary aware).

    Args:
        data: Raw PDF bytes
        max_pages: Hard cap on decoded pages
        max_chars: Maximum length of the returned text

    Returns:
        Extracted text (may be empty for image-only PDFs)

    Raises:
        ParseError: If the buffer is not a readable PDF. Callers treat
            this as "no text available".

    Example:
        text = extract_text(pdf_bytes, max_pages=6, max_chars=8000)
    """
    content = PDFParser().parse_bytes(data, max_pages=max_pages)
    text = re.sub(r"\s+\n", "\n", content.full_text).strip()
    if max_chars and len(text) > max_chars:
        return text[:max_chars]
    return text


def derive_title(text: str, default: str = DEFAULT_CHAPTER_TITLE) -> str:
    """
    Guess a chapter title from the first page of extracted text.

    Preference order:
    1. The first line starting with "Chapter <N>"
    2. The first line that starts with a letter and is 10+ characters long
    3. The default

    This scans OCR'd/typeset first pages for a title-like line; it is a
    heuristic and can pick a subtitle or an opening sentence instead.

    Example:
        derive_title("3\\nChapter  1   Real Numbers\\n...")  # 'Chapter 1 Real Numbers'
    """
    lines = [re.sub(r"\s+", " ", line).strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    for line in lines:
        if _CHAPTER_LINE.match(line):
            return line

    for line in lines:
        if _HEADING_LINE.match(line) and len(line) >= 10:
            return line

    return default

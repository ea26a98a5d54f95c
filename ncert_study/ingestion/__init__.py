"""
Ingestion module - Gets chapter PDFs and reads them.

This module is responsible for:
1. Downloading documents from the publisher
2. Caching PDFs on local disk
3. Extracting text and chapter titles
"""

from .fetcher import Fetcher
from .pdf_cache import PdfCache
from .pdf_parser import PDFParser, derive_title, extract_text

__all__ = ["Fetcher", "PdfCache", "PDFParser", "derive_title", "extract_text"]

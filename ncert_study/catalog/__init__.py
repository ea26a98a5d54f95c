"""
Catalog module - Finds NCERT books and chapters.

This module is responsible for:
1. Normalising subject and language names
2. Reading the live catalog (ChromaDB) and the bundled book list
3. Resolving loose queries to a single book edition
"""

from .models import BookQuery, BookRecord, BookResponse, ChapterRecord, LibraryOptions
from .resolver import CatalogResolver

__all__ = [
    "BookQuery",
    "BookRecord",
    "BookResponse",
    "ChapterRecord",
    "LibraryOptions",
    "CatalogResolver",
]

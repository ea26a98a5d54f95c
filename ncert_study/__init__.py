"""
NCERT Study Library - NCERT textbook catalog and study helper for CBSE students

This package provides:
- A catalog resolver over a live ChromaDB catalog with a bundled fallback
- Chapter PDF fetching with an on-disk cache
- PDF text extraction and chapter title derivation
- Topic-to-chapter matching and study summaries via Ollama
- CLI and Web interfaces
"""

__version__ = "0.2.0"

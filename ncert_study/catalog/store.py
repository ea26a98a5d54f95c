"""
Catalog Store - Live book/chapter catalog kept in ChromaDB.

The scraper (scripts/scrape_ncert.py) writes one record per book and one per
chapter; the request path only reads them back with metadata filters.

Key Concepts:
- Collections: ``ncert_books`` and ``ncert_chapters``
- Metadata: the structured fields (class, subjectKey, number, ...)
- Documents: the book title, or the chapter's extracted text
- Embeddings: the chapter preview embedded with the sentence-transformers model
- IDs: book ids from build_book_doc_id(), chapter ids "<bookId>-ch-NN"

ChromaDB metadata cannot hold None, so empty fields are dropped on write.
"""

from pathlib import Path

import chromadb

from ncert_study.config import (
    BOOKS_COLLECTION,
    CATALOG_DIR,
    CATALOG_HOST,
    CATALOG_PORT,
    CHAPTERS_COLLECTION,
)
from ncert_study.errors import NotConfiguredError
from ncert_study.logger import get_logger

logger = get_logger(__name__)


def is_catalog_configured() -> bool:
    """True when a live catalog location is set in the environment."""
    return bool(CATALOG_HOST or CATALOG_DIR)


def build_where(filters: dict[str, str | int]) -> dict | None:
    """
    Turn equality filters into a ChromaDB ``where`` clause.

    Example:
        build_where({"class": "10"})                       # {'class': '10'}
        build_where({"class": "10", "subjectKey": "math"})
        # {'$and': [{'class': '10'}, {'subjectKey': 'math'}]}
    """
    clauses = [{key: value} for key, value in filters.items() if value is not None]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _clean_metadata(metadata: dict) -> dict:
    return {key: value for key, value in metadata.items() if value is not None}


class CatalogClient:
    """
    Explicitly constructed handle on the live catalog.

    Build one with from_config() at startup and pass it to the resolver and
    the scraper; nothing in the package opens its own connection.

    Example:
        client = CatalogClient.from_config()
        book = client.get_book("class-10_mathematics_english_jemh1")
        chapters = client.get_chapters(book["id"])
    """

    def __init__(self, client):
        """
        Initialize the store around an existing chromadb client.

        Args:
            client: chromadb.PersistentClient, HttpClient or EphemeralClient
        """
        self._client = client
        self._books = self._client.get_or_create_collection(
            name=BOOKS_COLLECTION,
            metadata={"description": "NCERT textbook editions", "hnsw:space": "cosine"},
        )
        self._chapters = self._client.get_or_create_collection(
            name=CHAPTERS_COLLECTION,
            metadata={"description": "NCERT textbook chapters", "hnsw:space": "cosine"},
        )

    @classmethod
    def from_config(
        cls,
        host: str | None = None,
        port: int | None = None,
        persist_directory: str | Path | None = None,
    ) -> "CatalogClient":
        """
        Connect using explicit arguments or the environment.

        A host selects a chroma server; otherwise a local directory is
        opened (and created if missing).

        Raises:
            NotConfiguredError: If neither a host nor a directory is set
        """
        host = host or CATALOG_HOST
        persist_directory = persist_directory or CATALOG_DIR

        if host:
            logger.info("Connecting to catalog server %s:%s", host, port or CATALOG_PORT)
            return cls(chromadb.HttpClient(host=host, port=port or CATALOG_PORT))

        if persist_directory:
            path = Path(persist_directory)
            path.mkdir(parents=True, exist_ok=True)
            logger.info("Opening catalog database at %s", path)
            return cls(chromadb.PersistentClient(path=str(path)))

        raise NotConfiguredError(
            "Live catalog is not configured. Set NCERT_CATALOG_HOST "
            "(chroma server) or NCERT_CATALOG_DIR (local database)."
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def book_count(self) -> int:
        return self._books.count()

    def get_book(self, book_id: str) -> dict | None:
        """Return a book's metadata (with its id under "id") or None."""
        result = self._books.get(ids=[book_id], include=["metadatas"])
        if not result["ids"]:
            return None
        return {**(result["metadatas"][0] or {}), "id": result["ids"][0]}

    def find_books(self, filters: dict[str, str | int]) -> list[dict]:
        """Return every book whose metadata equals all the given filters."""
        result = self._books.get(where=build_where(filters), include=["metadatas"])
        return [
            {**(meta or {}), "id": doc_id}
            for doc_id, meta in zip(result["ids"], result["metadatas"])
        ]

    def list_books(self) -> list[dict]:
        return self.find_books({})

    def get_chapters(self, book_id: str) -> list[dict]:
        """Return the chapter metadata of a book, ordered by number."""
        result = self._chapters.get(where={"bookId": book_id}, include=["metadatas"])
        chapters = [
            {**(meta or {}), "id": doc_id}
            for doc_id, meta in zip(result["ids"], result["metadatas"])
        ]
        chapters.sort(key=lambda c: c.get("number") or 0)
        return chapters

    def get_chapter_text(self, chapter_id: str) -> str | None:
        """
        Return the extracted text stored with a chapter, or None.

        The scraper keeps the chapter text as the record's document and sets
        ``hasText``; records without it only hold a title as their document.
        """
        result = self._chapters.get(ids=[chapter_id], include=["metadatas", "documents"])
        if not result["ids"]:
            return None
        metadata = result["metadatas"][0] or {}
        if not metadata.get("hasText"):
            return None
        return result["documents"][0] or None

    # -------------------------------------------------------------------------
    # Writes (scraper only)
    # -------------------------------------------------------------------------

    def upsert_book(
        self,
        book_id: str,
        metadata: dict,
        document: str,
        embedding: list[float],
    ) -> None:
        self._books.upsert(
            ids=[book_id],
            metadatas=[_clean_metadata(metadata)],
            documents=[document],
            embeddings=[embedding],
        )

    def upsert_chapter(
        self,
        chapter_id: str,
        metadata: dict,
        document: str,
        embedding: list[float],
    ) -> None:
        self._chapters.upsert(
            ids=[chapter_id],
            metadatas=[_clean_metadata(metadata)],
            documents=[document],
            embeddings=[embedding],
        )

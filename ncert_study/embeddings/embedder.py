"""
Embedder - Converts chapter previews to vector embeddings.

ChromaDB stores an embedding next to every record, so the scraper embeds
each chapter's text preview (and each book's title) before writing it.

Key Concepts:
- Embeddings are lists of numbers that represent meaning
- The same model must be used for every record in a collection
- The model creates 384-dimensional vectors

Example:
    embedder = Embedder()
    vector = embedder.embed("Real Numbers. Euclid's division lemma ...")
    print(len(vector))  # 384
"""

from sentence_transformers import SentenceTransformer

from ncert_study.config import EMBEDDING_DIMENSION, EMBEDDING_MODEL
from ncert_study.logger import get_logger

logger = get_logger(__name__)


class Embedder:
    """
    Wraps a SentenceTransformer model.

    The model is loaded on first use; creating an Embedder is cheap.
    """

    def __init__(self, model_name: str | None = None):
        """
        Args:
            model_name: sentence-transformers model (defaults to config).
                First run downloads the model (~90MB for MiniLM).
        """
        self.model_name = model_name or EMBEDDING_MODEL
        self._model = None

    @property
    def model(self) -> SentenceTransformer:
        if self._model is None:
            logger.info("Loading embedding model: %s", self.model_name)
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed(self, text: str) -> list[float]:
        """
        Convert one text to an embedding vector.

        Empty text gets a zero vector without touching the model.
        """
        if not text or not text.strip():
            return [0.0] * EMBEDDING_DIMENSION
        return self.model.encode(text, convert_to_numpy=True).tolist()


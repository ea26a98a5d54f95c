"""
Embeddings module - Embedding generation for catalog records.
"""

from .embedder import Embedder

__all__ = ["Embedder"]

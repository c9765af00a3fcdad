"""Tokenization, tensor shaping, pooling and similarity for text embeddings."""

from .generator import EmbeddingGenerator
from .models import EMBEDDING_DIM, Encoding, OutputKind, PoolingStrategy
from .pooling import normalize
from .similarity import cosine_similarity

__all__ = [
    "EMBEDDING_DIM",
    "EmbeddingGenerator",
    "Encoding",
    "OutputKind",
    "PoolingStrategy",
    "cosine_similarity",
    "normalize",
]

"""Cosine similarity between embedding vectors."""

from collections.abc import Sequence

import numpy as np

from ..errors import DimensionMismatchError
from .models import Embedding, EmbeddingBatch


def cosine_similarity(
    embedding1: Embedding | Sequence[float], embedding2: Embedding | Sequence[float]
) -> float:
    """Calculate cosine similarity between two vectors.

    Norms are always computed, so inputs do not have to be normalized.

    Args:
        embedding1: First vector (H,)
        embedding2: Second vector (H,)

    Returns:
        Score between -1.0 and 1.0; 0.0 if either vector is zero

    Raises:
        DimensionMismatchError: If the vectors are not 1-D or differ in length
    """
    a = np.asarray(embedding1, dtype=np.float64)
    b = np.asarray(embedding2, dtype=np.float64)

    if a.ndim != 1 or b.ndim != 1:
        raise DimensionMismatchError(
            f"Expected 1-D vectors, got shapes {a.shape} and {b.shape}"
        )
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Vector lengths differ: {a.shape[0]} vs {b.shape[0]}"
        )

    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0.0:
        return 0.0

    similarity = float(np.dot(a, b) / norm_product)

    # Clamp to valid range to handle floating point precision
    return max(-1.0, min(1.0, similarity))


def similarity_matrix(embeddings: EmbeddingBatch) -> np.ndarray:
    """Pairwise cosine similarity for every row of a batch, shape (N, N)."""
    batch = np.asarray(embeddings, dtype=np.float64)
    if batch.ndim != 2:
        raise DimensionMismatchError(f"Expected a (N, H) batch, got shape {batch.shape}")

    norms = np.linalg.norm(batch, axis=1, keepdims=True)
    unit = batch / np.where(norms > 0.0, norms, 1.0)
    return np.clip(unit @ unit.T, -1.0, 1.0)

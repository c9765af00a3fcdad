"""Reduce raw graph output to one normalized vector per text."""

import numpy as np

from .models import NORM_EPSILON, OutputKind, PoolingStrategy


def mean_pool(token_embeddings: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
    """Average token vectors over the positions where the mask is 1.

    Args:
        token_embeddings: Hidden states, shape (N, L, H)
        attention_mask: Mask, shape (N, L)

    Returns:
        Pooled vectors, shape (N, H). A row with no valid tokens is zero.
    """
    mask = attention_mask.astype(token_embeddings.dtype)[..., np.newaxis]
    summed = (token_embeddings * mask).sum(axis=1)
    # Rows without tokens have a zero sum, so a divisor of 1 keeps them zero
    counts = np.maximum(mask.sum(axis=1), 1)
    return summed / counts


def cls_pool(
    token_embeddings: np.ndarray, attention_mask: np.ndarray | None = None
) -> np.ndarray:
    """Take the first real token's hidden state of each row, shape (N, H).

    With a mask, the first position where it is 1 is used, so left-padded
    batches still pick [CLS] rather than a pad token. Without one, position
    0 is used.
    """
    if attention_mask is None:
        return token_embeddings[:, 0, :]

    first = np.argmax(np.asarray(attention_mask) > 0, axis=1)
    return token_embeddings[np.arange(token_embeddings.shape[0]), first, :]


def pool(
    raw: np.ndarray,
    attention_mask: np.ndarray,
    kind: OutputKind,
    strategy: PoolingStrategy = PoolingStrategy.MEAN,
) -> np.ndarray:
    """Pool raw model output according to its kind.

    Args:
        raw: Output of shape (N, L, H) or (N, H)
        attention_mask: Mask used for the run, shape (N, L)
        kind: Output kind resolved when the model was loaded
        strategy: Reduction used for token-level output

    Returns:
        Pooled vectors, shape (N, H)
    """
    if kind is OutputKind.SENTENCE_EMBEDDING:
        return raw

    if strategy is PoolingStrategy.CLS:
        return cls_pool(raw, attention_mask)
    return mean_pool(raw, attention_mask)


def normalize(vectors: np.ndarray, eps: float = NORM_EPSILON) -> np.ndarray:
    """L2-normalize a vector or each row of a batch.

    Vectors whose norm is not greater than eps are returned unchanged,
    which leaves zero vectors as zero vectors.

    Args:
        vectors: Shape (H,) or (N, H)
        eps: Norm threshold below which a vector is left alone

    Returns:
        Array of the same shape
    """
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    safe = np.where(norms > eps, norms, 1.0)
    return vectors / safe

"""Text embedding generation through tokenizer, graph and pooling."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from .models import Embedding, EmbeddingBatch, PoolingStrategy
from .pooling import normalize, pool
from .similarity import cosine_similarity
from .tensors import build_input_tensors

if TYPE_CHECKING:
    from ..engine import EngineHandle

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """Generate sentence embeddings with a loaded engine handle.

    The handle is passed in rather than looked up globally, so several
    generators over different models can live in one process.
    """

    def __init__(
        self,
        handle: "EngineHandle",
        pooling: PoolingStrategy = PoolingStrategy.MEAN,
        add_special_tokens: bool = True,
        normalize_embeddings: bool = True,
    ):
        """Initialize the generator.

        Args:
            handle: Loaded engine handle
            pooling: Reduction for models that return per-token states
            add_special_tokens: Whether to add [CLS]/[SEP] style tokens
            normalize_embeddings: Whether to L2-normalize the output
        """
        self.handle = handle
        self.pooling = PoolingStrategy(pooling)
        self.add_special_tokens = add_special_tokens
        self.normalize_embeddings = normalize_embeddings

    @property
    def dimension(self) -> int | None:
        return self.handle.dimension

    def generate(self, texts: Sequence[str]) -> EmbeddingBatch:
        """Generate embeddings for one or more texts.

        Args:
            texts: Text strings to embed

        Returns:
            float32 array of shape (len(texts), H)

        Raises:
            TokenizationError: If texts is empty or cannot be encoded
            InferenceError: If the model run fails
        """
        encodings = self.handle.tokenizer.encode_batch(
            texts, add_special_tokens=self.add_special_tokens
        )
        tensors = build_input_tensors(encodings)
        logger.debug(f"Built input tensors of shape {tensors.shape}")

        raw = self.handle.run(
            tensors.input_ids, tensors.attention_mask, tensors.token_type_ids
        )
        pooled = pool(raw, tensors.attention_mask, self.handle.output_kind, self.pooling)

        if self.normalize_embeddings:
            pooled = normalize(pooled)

        return np.asarray(pooled, dtype=np.float32)

    def embed(self, text: str) -> Embedding:
        """Generate the embedding of a single text, shape (H,)."""
        return self.generate([text])[0]

    def similarity(self, embedding1: Embedding, embedding2: Embedding) -> float:
        """Cosine similarity between two embeddings, see cosine_similarity."""
        return cosine_similarity(embedding1, embedding2)

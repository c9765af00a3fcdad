"""Core functionality for textvec - wires configuration to the embedding pipeline."""

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from .config import TextvecConfig, load_config
from .embeddings.generator import EmbeddingGenerator
from .embeddings.models import Embedding, EmbeddingBatch, PoolingStrategy
from .embeddings.similarity import similarity_matrix
from .engine import load
from .storage import write_embedding

logger = logging.getLogger(__name__)


def load_generator(
    config: TextvecConfig | None = None,
    model_path: str | Path | None = None,
    tokenizer_path: str | Path | None = None,
    pooling: PoolingStrategy | str | None = None,
    add_special_tokens: bool | None = None,
) -> EmbeddingGenerator:
    """Load an engine handle and wrap it in a generator.

    Explicit arguments take priority over the configuration.

    Args:
        config: Loaded configuration, read with load_config() if omitted
        model_path: Override for the .onnx graph path
        tokenizer_path: Override for the tokenizer.json path
        pooling: Override for the pooling strategy
        add_special_tokens: Override for special token handling

    Returns:
        Ready to use EmbeddingGenerator

    Raises:
        TokenizationError: If the tokenizer cannot be loaded
        ModelLoadError: If the graph cannot be loaded
    """
    config = config or load_config()

    handle = load(
        model_source=model_path or config.model.model_path,
        tokenizer_source=tokenizer_path or config.model.tokenizer_path,
        intra_threads=config.model.intra_threads,
        optimization_level=config.model.optimization_level,
        pad_token=config.embedding.pad_token,
    )

    return EmbeddingGenerator(
        handle,
        pooling=PoolingStrategy(pooling or config.embedding.pooling),
        add_special_tokens=(
            config.embedding.add_special_tokens
            if add_special_tokens is None
            else add_special_tokens
        ),
        normalize_embeddings=config.embedding.normalize,
    )


def embed_text(
    text: str,
    generator: EmbeddingGenerator,
    output_file: str | Path | None = None,
) -> Embedding:
    """Embed one text and optionally save it as JSON.

    Args:
        text: Text to embed
        generator: Loaded generator
        output_file: Where to write the JSON array, skipped if None

    Returns:
        Embedding vector of shape (H,)
    """
    embedding = generator.embed(text)
    logger.debug(f"Embedded text of {len(text)} chars into {embedding.shape[0]} dims")

    if output_file is not None:
        write_embedding(embedding, output_file)

    return embedding


def embed_texts(texts: Sequence[str], generator: EmbeddingGenerator) -> EmbeddingBatch:
    """Embed a batch of texts, shape (N, H)."""
    return generator.generate(texts)


def compare_texts(
    texts: Sequence[str], generator: EmbeddingGenerator
) -> list[tuple[int, int, float]]:
    """Embed texts in one batch and score every pair.

    Args:
        texts: At least two texts
        generator: Loaded generator

    Returns:
        List of (i, j, similarity) for i < j, in batch order

    Raises:
        ValueError: If fewer than two texts are given
    """
    if len(texts) < 2:
        raise ValueError("Need at least two texts to compare")

    embeddings = generator.generate(texts)
    if len(texts) == 2:
        return [(0, 1, generator.similarity(embeddings[0], embeddings[1]))]

    scores = similarity_matrix(embeddings)
    rows, cols = np.triu_indices(len(texts), k=1)
    return [(int(i), int(j), float(scores[i, j])) for i, j in zip(rows, cols)]

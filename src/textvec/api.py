"""High-level async API for textvec library usage."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from .core import compare_texts, embed_texts, load_generator
from .embeddings.generator import EmbeddingGenerator
from .embeddings.models import EmbeddingBatch


async def embed(
    texts: Sequence[str],
    model_path: str | Path | None = None,
    tokenizer_path: str | Path | None = None,
    generator: EmbeddingGenerator | None = None,
) -> EmbeddingBatch:
    """Embed texts without blocking the event loop.

    Args:
        texts: Texts to embed
        model_path: Path to the .onnx graph (config default if None)
        tokenizer_path: Path to tokenizer.json (config default if None)
        generator: Already loaded generator to reuse; loading is skipped

    Returns:
        Embeddings of shape (len(texts), H)

    Raises:
        TokenizationError: If texts cannot be tokenized
        ModelLoadError: If the model cannot be loaded
        InferenceError: If the model run fails
    """
    if generator is None:
        generator = await asyncio.to_thread(
            load_generator, model_path=model_path, tokenizer_path=tokenizer_path
        )
    return await asyncio.to_thread(embed_texts, texts, generator)


async def similarity(
    text1: str,
    text2: str,
    model_path: str | Path | None = None,
    tokenizer_path: str | Path | None = None,
    generator: EmbeddingGenerator | None = None,
) -> float:
    """Cosine similarity between two texts without blocking the event loop.

    Args:
        text1: First text
        text2: Second text
        model_path: Path to the .onnx graph (config default if None)
        tokenizer_path: Path to tokenizer.json (config default if None)
        generator: Already loaded generator to reuse; loading is skipped

    Returns:
        Similarity score between -1.0 and 1.0
    """
    if generator is None:
        generator = await asyncio.to_thread(
            load_generator, model_path=model_path, tokenizer_path=tokenizer_path
        )
    pairs = await asyncio.to_thread(compare_texts, [text1, text2], generator)
    return pairs[0][2]

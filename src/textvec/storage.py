"""JSON storage for a single embedding vector."""

import json
import logging
from pathlib import Path

import numpy as np

from .embeddings.models import Embedding

logger = logging.getLogger(__name__)


def write_embedding(embedding: Embedding, path: str | Path) -> Path:
    """Write one embedding as a JSON array of floats.

    Args:
        embedding: Vector of shape (H,)
        path: Output file

    Returns:
        Path written

    Raises:
        ValueError: If embedding is not a 1-D vector
        OSError: If the file cannot be written
    """
    vector = np.asarray(embedding)
    if vector.ndim != 1:
        raise ValueError(f"Expected a 1-D embedding, got shape {vector.shape}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([float(x) for x in vector]))
    logger.debug(f"Wrote {vector.shape[0]}-dim embedding to {path}")
    return path


def read_embedding(path: str | Path) -> Embedding:
    """Read an embedding written by write_embedding as float32.

    Raises:
        ValueError: If the file does not hold a flat JSON array of numbers
        OSError: If the file cannot be read
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in data
    ):
        raise ValueError(f"{path} does not contain a JSON array of numbers")
    return np.asarray(data, dtype=np.float32)

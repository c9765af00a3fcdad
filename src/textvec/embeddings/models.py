"""Embedding data models and constants."""

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

import numpy as np

# Model configuration constants
EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
EMBEDDING_DIM = 384

DEFAULT_MODEL_PATH = "./model.onnx"
DEFAULT_TOKENIZER_PATH = "./tokenizer.json"
DEFAULT_PAD_TOKEN = "[PAD]"

# Graph inputs, in the order the model expects them
INPUT_NAMES = ("input_ids", "attention_mask", "token_type_ids")

# Norms at or below this are treated as zero when normalizing
NORM_EPSILON = 1e-12

# Type aliases for clarity
Embedding: TypeAlias = np.ndarray  # Shape: (H,)
EmbeddingBatch: TypeAlias = np.ndarray  # Shape: (n, H)


class OutputKind(str, Enum):
    """Shape of the first graph output, resolved once at load time."""

    TOKEN_EMBEDDINGS = "token_embeddings"  # [N, L, H]
    SENTENCE_EMBEDDING = "sentence_embedding"  # [N, H]


class PoolingStrategy(str, Enum):
    """How per-token hidden states are reduced to one vector."""

    MEAN = "mean"
    CLS = "cls"


@dataclass(frozen=True)
class Encoding:
    """Tokenized form of one text, padded to the batch length.

    Attributes:
        ids: Token ids
        attention_mask: 1 for real tokens, 0 for padding
        type_ids: Token type (segment) ids
    """

    ids: tuple[int, ...]
    attention_mask: tuple[int, ...]
    type_ids: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def token_count(self) -> int:
        """Number of non-padded tokens."""
        return sum(self.attention_mask)


@dataclass(frozen=True)
class InputTensors:
    """The three [N, L] int64 tensors fed to the graph."""

    input_ids: np.ndarray
    attention_mask: np.ndarray
    token_type_ids: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.input_ids.shape  # type: ignore[return-value]

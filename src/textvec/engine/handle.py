"""Long-lived handle owning the tokenizer and the compiled graph."""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from ..embeddings.models import (
    DEFAULT_MODEL_PATH,
    DEFAULT_PAD_TOKEN,
    DEFAULT_TOKENIZER_PATH,
    OutputKind,
)
from ..embeddings.tokenizer import TokenizerAdapter
from .session import GraphSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineHandle:
    """Tokenizer and graph acquired together, used for every inference call.

    Attributes:
        tokenizer: Batch tokenizer loaded from tokenizer.json
        graph: Loaded computation graph
    """

    tokenizer: TokenizerAdapter
    graph: GraphSession

    @property
    def output_kind(self) -> OutputKind:
        return self.graph.output_kind

    @property
    def dimension(self) -> int | None:
        return self.graph.dimension

    def run(
        self,
        input_ids: np.ndarray,
        attention_mask: np.ndarray,
        token_type_ids: np.ndarray,
    ) -> np.ndarray:
        """Run the graph on one batch of input tensors, see GraphSession.run."""
        return self.graph.run(input_ids, attention_mask, token_type_ids)


def load(
    model_source: str | Path = DEFAULT_MODEL_PATH,
    tokenizer_source: str | Path = DEFAULT_TOKENIZER_PATH,
    intra_threads: int = 1,
    optimization_level: str = "basic",
    pad_token: str = DEFAULT_PAD_TOKEN,
) -> EngineHandle:
    """Load the tokenizer and the graph into a new handle.

    Either resource failing means no handle is returned.

    Args:
        model_source: Path to the .onnx graph
        tokenizer_source: Path to tokenizer.json
        intra_threads: Fixed number of intra-op worker threads
        optimization_level: Graph optimization level
        pad_token: Pad token used when the tokenizer declares no padding

    Returns:
        EngineHandle ready for inference

    Raises:
        TokenizationError: If the tokenizer resource cannot be loaded
        ModelLoadError: If the graph cannot be loaded or has the wrong signature
    """
    tokenizer = TokenizerAdapter.from_file(tokenizer_source, pad_token=pad_token)
    graph = GraphSession.load(
        model_source,
        intra_threads=intra_threads,
        optimization_level=optimization_level,
    )
    logger.debug(f"Engine ready: model={model_source}, tokenizer={tokenizer_source}")
    return EngineHandle(tokenizer=tokenizer, graph=graph)

"""ONNX Runtime session wrapper for the compiled sentence-transformer graph."""

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from ..embeddings.models import INPUT_NAMES, OutputKind
from ..errors import InferenceError, ModelLoadError

if TYPE_CHECKING:
    import onnxruntime as ort

logger = logging.getLogger(__name__)

OPTIMIZATION_LEVELS = ("disabled", "basic", "extended", "all")

# ONNX element types accepted for the three graph inputs
_INTEGER_INPUT_TYPES = {
    "tensor(int64)": np.int64,
    "tensor(int32)": np.int32,
}


def _session_options(intra_threads: int, optimization_level: str) -> "ort.SessionOptions":
    import onnxruntime as ort

    levels = {
        "disabled": ort.GraphOptimizationLevel.ORT_DISABLE_ALL,
        "basic": ort.GraphOptimizationLevel.ORT_ENABLE_BASIC,
        "extended": ort.GraphOptimizationLevel.ORT_ENABLE_EXTENDED,
        "all": ort.GraphOptimizationLevel.ORT_ENABLE_ALL,
    }

    options = ort.SessionOptions()
    options.graph_optimization_level = levels[optimization_level]
    options.intra_op_num_threads = intra_threads
    options.inter_op_num_threads = 1
    options.execution_mode = ort.ExecutionMode.ORT_SEQUENTIAL
    return options


class GraphSession:
    """A loaded computation graph with a validated three-input signature.

    The output kind and hidden dimension are resolved once from the graph's
    declared output shape. Runs are serialized with a per-instance lock.
    """

    def __init__(self, session: "ort.InferenceSession", source: str = "<memory>"):
        """Validate and wrap an ONNX Runtime session.

        Args:
            session: Loaded ``onnxruntime.InferenceSession``
            source: Where the graph came from, for messages

        Raises:
            ModelLoadError: If inputs or the first output do not match the
                expected signature
        """
        self.source = source
        self._session = session
        self._lock = threading.Lock()

        inputs = session.get_inputs()
        names = tuple(arg.name for arg in inputs)
        if names != INPUT_NAMES:
            raise ModelLoadError(
                f"Model {source} has inputs {list(names)}, expected {list(INPUT_NAMES)}"
            )

        self._input_dtypes = []
        for arg in inputs:
            if arg.type not in _INTEGER_INPUT_TYPES:
                raise ModelLoadError(
                    f"Model input {arg.name!r} has type {arg.type}, expected an integer tensor"
                )
            self._input_dtypes.append(_INTEGER_INPUT_TYPES[arg.type])

        outputs = session.get_outputs()
        if not outputs:
            raise ModelLoadError(f"Model {source} declares no outputs")

        first = outputs[0]
        self.output_name: str = first.name
        rank = len(first.shape)
        if rank == 3:
            self.output_kind = OutputKind.TOKEN_EMBEDDINGS
        elif rank == 2:
            self.output_kind = OutputKind.SENTENCE_EMBEDDING
        else:
            raise ModelLoadError(
                f"Model output {first.name!r} has rank {rank}, expected 2 or 3"
            )

        last_dim = first.shape[-1]
        self.dimension: int | None = last_dim if isinstance(last_dim, int) else None

    @classmethod
    def load(
        cls,
        path: str | Path,
        intra_threads: int = 1,
        optimization_level: str = "basic",
    ) -> "GraphSession":
        """Load and optimize a graph from local storage.

        Args:
            path: Path to the .onnx file
            intra_threads: Fixed number of intra-op worker threads
            optimization_level: One of OPTIMIZATION_LEVELS

        Returns:
            Validated GraphSession

        Raises:
            ModelLoadError: If the file is missing, malformed or has the
                wrong signature
        """
        import onnxruntime as ort

        path = Path(path)
        if not path.is_file():
            raise ModelLoadError(f"Model file not found: {path}")
        if optimization_level not in OPTIMIZATION_LEVELS:
            raise ModelLoadError(
                f"Unknown optimization level {optimization_level!r}, "
                f"expected one of {', '.join(OPTIMIZATION_LEVELS)}"
            )
        if intra_threads < 1:
            raise ModelLoadError(f"Thread count must be at least 1, got {intra_threads}")

        start = time.perf_counter()
        try:
            session = ort.InferenceSession(
                str(path),
                sess_options=_session_options(intra_threads, optimization_level),
                providers=["CPUExecutionProvider"],
            )
        except Exception as e:
            raise ModelLoadError(f"Failed to load model from {path}: {e}", e) from e

        graph = cls(session, source=str(path))
        logger.info(
            f"Loaded model {path} ({graph.output_kind.value}, "
            f"dim={graph.dimension}) in {time.perf_counter() - start:.2f}s"
        )
        return graph

    def run(
        self,
        input_ids: np.ndarray,
        attention_mask: np.ndarray,
        token_type_ids: np.ndarray,
    ) -> np.ndarray:
        """Execute the graph and return its first output.

        Args:
            input_ids: Token ids, shape (N, L)
            attention_mask: Attention mask, shape (N, L)
            token_type_ids: Token type ids, shape (N, L)

        Returns:
            Raw output tensor, shape (N, L, H) or (N, H)

        Raises:
            InferenceError: If the run fails or yields a non-float tensor
        """
        feed = {
            name: np.asarray(tensor, dtype=dtype)
            for name, tensor, dtype in zip(
                INPUT_NAMES,
                (input_ids, attention_mask, token_type_ids),
                self._input_dtypes,
            )
        }

        with self._lock:
            try:
                result = self._session.run([self.output_name], feed)[0]
            except Exception as e:
                raise InferenceError(f"Model run failed: {e}", e) from e

        output = np.asarray(result)
        if not np.issubdtype(output.dtype, np.floating):
            raise InferenceError(
                f"Model output {self.output_name!r} has dtype {output.dtype}, "
                "expected floating point"
            )

        expected_rank = 3 if self.output_kind is OutputKind.TOKEN_EMBEDDINGS else 2
        if output.ndim != expected_rank:
            raise InferenceError(
                f"Model output has shape {output.shape}, expected rank {expected_rank}"
            )

        logger.debug(f"Model run produced output of shape {output.shape}")
        return output

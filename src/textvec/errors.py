"""Custom textvec exceptions."""


class TextvecError(Exception):
    """Base exception for embedding pipeline errors.

    Every error carries the pipeline stage that failed so callers can tell
    tokenization, loading, inference and scoring failures apart.
    """

    stage = "pipeline"

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class TokenizationError(TextvecError):
    """Exception raised when text cannot be turned into encodings.

    This typically occurs when:
    - The input batch is empty
    - The tokenizer resource is missing or malformed
    - Some input contains content the tokenizer cannot encode
    """

    stage = "tokenization"


class ModelLoadError(TextvecError):
    """Exception raised when the computation graph cannot be loaded.

    This typically occurs when:
    - The model file does not exist or is not a valid graph
    - The graph inputs do not match (input_ids, attention_mask, token_type_ids)
    - The first output has a rank other than 2 or 3
    """

    stage = "load"


class InferenceError(TextvecError):
    """Exception raised when a graph run fails or returns non-float output."""

    stage = "inference"


class ShapeMismatchError(TextvecError):
    """Exception raised when encodings in one batch differ in length.

    The tokenizer pads every batch to a common length, so this signals a
    programming error rather than bad input.
    """

    stage = "tensors"


class DimensionMismatchError(TextvecError):
    """Exception raised when comparing vectors of different lengths."""

    stage = "scoring"


class ConfigError(TextvecError):
    """Exception raised for invalid configuration values."""

    stage = "config"

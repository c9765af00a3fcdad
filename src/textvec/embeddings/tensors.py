"""Shape encodings into the rectangular int64 tensors the graph consumes."""

from collections.abc import Sequence

import numpy as np

from ..errors import ShapeMismatchError
from .models import Encoding, InputTensors


def reshape_flat(values: Sequence[int] | np.ndarray, rows: int, length: int) -> np.ndarray:
    """Reshape a flat row-major sequence into a [rows, length] int64 tensor.

    A contiguous int64 array is reshaped as a view, anything else is
    converted once.

    Raises:
        ShapeMismatchError: If the number of values is not rows * length
    """
    flat = np.asarray(values, dtype=np.int64)
    if flat.ndim != 1 or flat.size != rows * length:
        raise ShapeMismatchError(
            f"Cannot reshape {flat.size} values into [{rows}, {length}]"
        )
    return flat.reshape(rows, length)


def build_input_tensors(encodings: Sequence[Encoding]) -> InputTensors:
    """Build the ids, attention mask and token type tensors for a batch.

    Args:
        encodings: Encodings of uniform length L

    Returns:
        InputTensors with three [N, L] int64 tensors; row i comes from
        encodings[i]

    Raises:
        ShapeMismatchError: If the batch is empty or lengths differ
    """
    if not encodings:
        raise ShapeMismatchError("Cannot build tensors from an empty batch")

    rows = len(encodings)
    length = len(encodings[0])
    for i, enc in enumerate(encodings):
        if not (len(enc.ids) == len(enc.attention_mask) == len(enc.type_ids) == length):
            raise ShapeMismatchError(
                f"Encoding {i} has length {len(enc.ids)}, expected {length}"
            )

    ids = np.fromiter(
        (t for enc in encodings for t in enc.ids), dtype=np.int64, count=rows * length
    )
    mask = np.fromiter(
        (t for enc in encodings for t in enc.attention_mask),
        dtype=np.int64,
        count=rows * length,
    )
    type_ids = np.fromiter(
        (t for enc in encodings for t in enc.type_ids),
        dtype=np.int64,
        count=rows * length,
    )

    return InputTensors(
        input_ids=reshape_flat(ids, rows, length),
        attention_mask=reshape_flat(mask, rows, length),
        token_type_ids=reshape_flat(type_ids, rows, length),
    )

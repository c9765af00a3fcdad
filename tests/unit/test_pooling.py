"""Unit tests for pooling and normalization."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from textvec.embeddings.models import OutputKind, PoolingStrategy
from textvec.embeddings.pooling import cls_pool, mean_pool, normalize, pool


class TestMeanPool:
    """Test masked mean pooling."""

    def setup_method(self) -> None:
        """Create deterministic hidden states of shape (2, 4, 3)."""
        rng = np.random.default_rng(7)
        self.hidden = rng.normal(size=(2, 4, 3))

    def test_all_ones_mask_is_plain_mean(self) -> None:
        """Test an all-ones mask averages every token."""
        mask = np.ones((2, 4), dtype=np.int64)

        pooled = mean_pool(self.hidden, mask)

        np.testing.assert_allclose(pooled, self.hidden.mean(axis=1), rtol=1e-6, atol=1e-12)

    def test_trailing_zeros_are_ignored(self) -> None:
        """Test k padded positions leave the mean of the first L-k tokens."""
        mask = np.array([[1, 1, 1, 0], [1, 0, 0, 0]], dtype=np.int64)

        pooled = mean_pool(self.hidden, mask)

        np.testing.assert_allclose(pooled[0], self.hidden[0, :3].mean(axis=0), rtol=1e-6, atol=1e-12)
        np.testing.assert_allclose(pooled[1], self.hidden[1, 0], rtol=1e-6, atol=1e-12)

    def test_padding_values_do_not_leak(self) -> None:
        """Test changing padded hidden states does not change the result."""
        mask = np.array([[1, 1, 0, 0], [1, 1, 1, 1]], dtype=np.int64)
        altered = self.hidden.copy()
        altered[0, 2:] = 1000.0

        np.testing.assert_allclose(
            mean_pool(altered, mask), mean_pool(self.hidden, mask), rtol=1e-6
        )

    def test_all_zero_mask_gives_zero_vector(self) -> None:
        """Test a row without tokens pools to zeros instead of NaN."""
        mask = np.array([[0, 0, 0, 0], [1, 1, 1, 1]], dtype=np.int64)

        pooled = mean_pool(self.hidden, mask)

        assert np.all(pooled[0] == 0.0)
        assert np.all(np.isfinite(pooled))

    def test_all_zero_mask_half_precision(self) -> None:
        """Test float16 output with no valid tokens still pools to zeros."""
        hidden = np.ones((1, 2, 3), dtype=np.float16)
        mask = np.zeros((1, 2), dtype=np.int64)

        pooled = mean_pool(hidden, mask)

        assert pooled.dtype == np.float16
        np.testing.assert_array_equal(pooled, np.zeros((1, 3), dtype=np.float16))

    def test_half_precision_mean(self) -> None:
        """Test float16 output is averaged over real tokens only."""
        hidden = np.array([[[1.0, 2.0], [3.0, 4.0], [9.0, 9.0]]], dtype=np.float16)
        mask = np.array([[1, 1, 0]], dtype=np.int64)

        np.testing.assert_allclose(mean_pool(hidden, mask), [[2.0, 3.0]])


class TestPool:
    """Test pool dispatch on output kind and strategy."""

    def test_sentence_embedding_rows_used_directly(self) -> None:
        """Test (N, H) output is returned as is."""
        raw = np.arange(6, dtype=np.float32).reshape(2, 3)
        mask = np.ones((2, 5), dtype=np.int64)

        pooled = pool(raw, mask, OutputKind.SENTENCE_EMBEDDING)

        assert pooled is raw

    def test_token_embeddings_use_mean_by_default(self) -> None:
        """Test token output is mean pooled by default."""
        raw = np.ones((1, 3, 2), dtype=np.float32)
        raw[0, 1] = 3.0
        mask = np.array([[1, 1, 0]])

        pooled = pool(raw, mask, OutputKind.TOKEN_EMBEDDINGS)

        np.testing.assert_allclose(pooled, [[2.0, 2.0]])

    def test_cls_strategy_takes_first_token(self) -> None:
        """Test CLS pooling extracts row 0 of each sequence."""
        raw = np.arange(12, dtype=np.float32).reshape(2, 3, 2)
        mask = np.ones((2, 3))

        pooled = pool(raw, mask, OutputKind.TOKEN_EMBEDDINGS, PoolingStrategy.CLS)

        np.testing.assert_array_equal(pooled, cls_pool(raw))
        np.testing.assert_array_equal(pooled, [[0.0, 1.0], [6.0, 7.0]])

    def test_cls_strategy_skips_left_padding(self) -> None:
        """Test CLS pooling picks the first real token when padding is on the left."""
        raw = np.arange(12, dtype=np.float32).reshape(2, 3, 2)
        mask = np.array([[1, 1, 1], [0, 0, 1]])

        pooled = pool(raw, mask, OutputKind.TOKEN_EMBEDDINGS, PoolingStrategy.CLS)

        np.testing.assert_array_equal(pooled, [[0.0, 1.0], [10.0, 11.0]])


class TestNormalize:
    """Test L2 normalization."""

    def test_rows_get_unit_norm(self) -> None:
        """Test each row of a batch is scaled to norm 1."""
        vectors = np.array([[3.0, 4.0], [0.0, 2.0]])

        result = normalize(vectors)

        np.testing.assert_allclose(np.linalg.norm(result, axis=1), [1.0, 1.0])
        np.testing.assert_allclose(result[0], [0.6, 0.8])

    def test_single_vector(self) -> None:
        """Test a 1-D vector is normalized too."""
        result = normalize(np.array([0.0, 0.0, 5.0]))

        np.testing.assert_allclose(result, [0.0, 0.0, 1.0])

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_normalize_is_idempotent(self, seed: int) -> None:
        """Test normalizing twice equals normalizing once."""
        vectors = np.random.default_rng(seed).normal(size=(4, 16))

        once = normalize(vectors)

        np.testing.assert_allclose(normalize(once), once, rtol=1e-12, atol=1e-12)

    def test_zero_vector_is_left_unchanged(self) -> None:
        """Test the zero vector stays zero both times."""
        zero = np.zeros(8)

        once = normalize(zero)

        np.testing.assert_array_equal(once, zero)
        np.testing.assert_array_equal(normalize(once), zero)

    def test_tiny_norm_is_left_unchanged(self) -> None:
        """Test vectors with norm below epsilon are not divided."""
        tiny = np.full(4, 1e-14)

        np.testing.assert_array_equal(normalize(tiny), tiny)

    def test_zero_row_does_not_affect_other_rows(self) -> None:
        """Test a zero row in a batch is kept while others are normalized."""
        vectors = np.array([[0.0, 0.0], [0.0, 3.0]])

        result = normalize(vectors)

        np.testing.assert_array_equal(result, [[0.0, 0.0], [0.0, 1.0]])

"""Pytest configuration and fixtures for textvec tests."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from test_helpers import write_model, write_tokenizer  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch) -> Generator[None]:
    """Point config loading at a test-specific file and clear its cache."""
    from textvec.config import reset_config

    monkeypatch.setenv("TEXTVEC_CONFIG", str(tmp_path / "config" / "config.toml"))
    for name in (
        "TEXTVEC_MODEL_PATH",
        "TEXTVEC_TOKENIZER_PATH",
        "TEXTVEC_THREADS",
        "TEXTVEC_POOLING",
        "TEXTVEC_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_config()
    yield
    reset_config()


@pytest.fixture
def tokenizer_file(tmp_path: Path) -> Path:
    """Real tokenizer.json built from the test vocabulary."""
    return write_tokenizer(tmp_path / "tokenizer.json")


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    """Real ONNX graph returning per-token hidden states."""
    pytest.importorskip("onnx")
    return write_model(tmp_path / "model.onnx")


@pytest.fixture
def pooled_model_file(tmp_path: Path) -> Path:
    """Real ONNX graph that pools internally and returns (N, H)."""
    pytest.importorskip("onnx")
    return write_model(tmp_path / "pooled.onnx", output_rank=2)

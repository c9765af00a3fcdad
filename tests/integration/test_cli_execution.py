"""Integration tests for CLI commands running the real pipeline."""

import json
import sys
from pathlib import Path

import numpy as np
import pytest
from typer.testing import CliRunner

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from test_helpers import HIDDEN_DIM

from textvec.cli import app
from textvec.storage import read_embedding

pytestmark = pytest.mark.integration

runner = CliRunner()


class TestEmbedCommand:
    """Test `textvec embed` end to end."""

    def test_embed_writes_unit_vector(
        self, model_file: Path, tokenizer_file: Path, tmp_path: Path
    ) -> None:
        """Test the JSON output holds one normalized vector."""
        output = tmp_path / "embedding.json"

        result = runner.invoke(
            app,
            [
                "embed",
                "the quick brown fox",
                "-m",
                str(model_file),
                "-k",
                str(tokenizer_file),
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert len(data) == HIDDEN_DIM
        assert np.linalg.norm(read_embedding(output)) == pytest.approx(1.0, rel=1e-6)

    def test_embed_reads_text_from_file(
        self, model_file: Path, tokenizer_file: Path, tmp_path: Path
    ) -> None:
        """Test --file supplies the text."""
        source = tmp_path / "input.txt"
        source.write_text("lazy dog")
        output = tmp_path / "out.json"

        result = runner.invoke(
            app,
            [
                "embed",
                "-f",
                str(source),
                "-m",
                str(model_file),
                "-k",
                str(tokenizer_file),
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_embed_uses_env_configured_paths(
        self, model_file: Path, tokenizer_file: Path, tmp_path: Path, monkeypatch
    ) -> None:
        """Test resource and output paths come from env vars."""
        output = tmp_path / "env.json"
        monkeypatch.setenv("TEXTVEC_MODEL_PATH", str(model_file))
        monkeypatch.setenv("TEXTVEC_TOKENIZER_PATH", str(tokenizer_file))
        monkeypatch.setenv("TEXTVEC_OUTPUT", str(output))

        result = runner.invoke(app, ["embed", "fox"])

        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_embed_malformed_model_fails(
        self, tokenizer_file: Path, tmp_path: Path
    ) -> None:
        """Test a corrupt model file reports a load failure."""
        model = tmp_path / "broken.onnx"
        model.write_bytes(b"not a graph")

        result = runner.invoke(
            app, ["embed", "fox", "-m", str(model), "-k", str(tokenizer_file)]
        )

        assert result.exit_code == 1
        assert "Failed to load model" in result.output


class TestSimilarityCommand:
    """Test `textvec similarity` end to end."""

    def test_identical_texts_score_one(self, model_file: Path, tokenizer_file: Path) -> None:
        """Test the same text twice prints 1.0."""
        result = runner.invoke(
            app,
            [
                "similarity",
                "the quick fox",
                "the quick fox",
                "-m",
                str(model_file),
                "-k",
                str(tokenizer_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert float(result.output.strip()) == pytest.approx(1.0, abs=1e-6)

    def test_three_texts_print_each_pair(
        self, model_file: Path, tokenizer_file: Path
    ) -> None:
        """Test N texts print N*(N-1)/2 tab separated rows."""
        result = runner.invoke(
            app,
            [
                "similarity",
                "fox",
                "dog",
                "fox",
                "-m",
                str(model_file),
                "-k",
                str(tokenizer_file),
            ],
        )

        assert result.exit_code == 0, result.output
        rows = [line.split("\t") for line in result.output.strip().splitlines()]
        assert [(r[0], r[1]) for r in rows] == [("0", "1"), ("0", "2"), ("1", "2")]
        assert float(rows[1][2]) == pytest.approx(1.0, abs=1e-6)

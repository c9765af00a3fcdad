"""Typer CLI definition for textvec."""

import logging
import sys
from pathlib import Path

import typer

from .config import generate_config, get_config_path, load_config
from .core import compare_texts, embed_text, load_generator
from .embeddings.models import EMBEDDING_MODEL, PoolingStrategy
from .errors import (
    ConfigError,
    DimensionMismatchError,
    InferenceError,
    ModelLoadError,
    ShapeMismatchError,
    TokenizationError,
)
from .models_manager import download_models, ensure_models_available

app = typer.Typer(help="Convert text to embeddings with an ONNX sentence-transformer")

# Stage label shown for each pipeline error
ERROR_LABELS: dict[type[Exception], str] = {
    TokenizationError: "Tokenization failed",
    ModelLoadError: "Failed to load model",
    InferenceError: "Inference failed",
    ShapeMismatchError: "Internal tensor shape error",
    DimensionMismatchError: "Cannot compare embeddings",
    ConfigError: "Invalid configuration",
}


def configure_logging(debug: bool) -> None:
    """Enable verbose logging when --debug is passed."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def read_text(text: str | None, file: Path | None) -> str:
    """Get the text to embed from argument, file, or stdin (in priority order).

    An argument is used as given. File and stdin content is stripped of
    surrounding whitespace.

    Args:
        text: Optional text input from CLI argument
        file: Optional file to read when no argument is given

    Returns:
        The text to embed

    Raises:
        ValueError: If no text is provided
    """
    if text is not None:
        return text

    if file:
        return file.read_text().strip()
    if not sys.stdin.isatty():
        return sys.stdin.read().strip()

    raise ValueError("No text provided")


def fail(error: Exception, debug: bool) -> typer.Exit:
    """Print an error the way the CLI reports it and build the exit."""
    label = next(
        (msg for cls, msg in ERROR_LABELS.items() if isinstance(error, cls)), None
    )
    if debug:
        typer.echo(f"Debug - {label or 'Unexpected error'}: {error!r}", err=True)
    elif label:
        typer.echo(f"Error: {label}: {error}", err=True)
    else:
        typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def _prepare(
    model_path: Path | None, tokenizer_path: Path | None, debug: bool
) -> tuple[str, str]:
    """Resolve resource paths and make sure the files exist."""
    try:
        config = load_config()
    except ConfigError as e:
        raise fail(e, debug) from None

    model = str(model_path or config.model.model_path)
    tokenizer = str(tokenizer_path or config.model.tokenizer_path)

    available, error_msg = ensure_models_available(model, tokenizer)
    if not available:
        typer.echo(error_msg, err=True)
        raise typer.Exit(1)
    return model, tokenizer


@app.command()
def embed(
    text: str | None = typer.Argument(None, help="Text to convert to an embedding"),
    file: Path | None = typer.Option(None, "-f", "--file", help="Read text from file"),
    tokenizer_path: Path | None = typer.Option(
        None, "-k", "--tokenizer-path", help="Path to tokenizer.json"
    ),
    model_path: Path | None = typer.Option(
        None, "-m", "--model-path", help="Path to the ONNX model"
    ),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Output JSON file (from config if omitted)"
    ),
    pooling: PoolingStrategy | None = typer.Option(
        None, "--pooling", help="Pooling for per-token model output"
    ),
    no_special_tokens: bool = typer.Option(
        False, "--no-special-tokens", help="Do not add [CLS]/[SEP] style tokens"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Embed one text and write the vector as a JSON array."""
    configure_logging(debug)

    try:
        input_text = read_text(text, file)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise fail(e, debug) from None

    model, tokenizer = _prepare(model_path, tokenizer_path, debug)
    output_file = output or Path(load_config().output.path)

    try:
        generator = load_generator(
            model_path=model,
            tokenizer_path=tokenizer,
            pooling=pooling,
            add_special_tokens=False if no_special_tokens else None,
        )
        embedding = embed_text(input_text, generator, output_file=output_file)
    except Exception as e:
        raise fail(e, debug) from None

    typer.echo(f"Embedding ({embedding.shape[0]} dims) saved to {output_file}")


@app.command()
def similarity(
    texts: list[str] = typer.Argument(..., help="Two or more texts to compare"),
    tokenizer_path: Path | None = typer.Option(
        None, "-k", "--tokenizer-path", help="Path to tokenizer.json"
    ),
    model_path: Path | None = typer.Option(
        None, "-m", "--model-path", help="Path to the ONNX model"
    ),
    pooling: PoolingStrategy | None = typer.Option(
        None, "--pooling", help="Pooling for per-token model output"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Print cosine similarity for every pair of texts."""
    configure_logging(debug)

    if len(texts) < 2:
        typer.echo("Error: Need at least two texts to compare", err=True)
        raise typer.Exit(1)

    model, tokenizer = _prepare(model_path, tokenizer_path, debug)

    try:
        generator = load_generator(
            model_path=model, tokenizer_path=tokenizer, pooling=pooling
        )
        pairs = compare_texts(texts, generator)
    except Exception as e:
        raise fail(e, debug) from None

    if len(pairs) == 1:
        typer.echo(f"{pairs[0][2]:.6f}")
        return

    for i, j, score in pairs:
        typer.echo(f"{i}\t{j}\t{score:.6f}")


@app.command("download-models")
def download_models_command(
    tokenizer_path: Path | None = typer.Option(
        None, "-k", "--tokenizer-path", help="Where to save tokenizer.json"
    ),
    model_path: Path | None = typer.Option(
        None, "-m", "--model-path", help="Where to save the ONNX model"
    ),
    repo: str = typer.Option(EMBEDDING_MODEL, "--repo", help="HuggingFace hub repo"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """Download the ONNX model and tokenizer."""
    configure_logging(debug)

    try:
        config = load_config()
    except ConfigError as e:
        raise fail(e, debug) from None

    typer.echo(f"Downloading {repo}... (this may take a minute)")
    try:
        model, tokenizer = download_models(
            model_path or config.model.model_path,
            tokenizer_path or config.model.tokenizer_path,
            repo_id=repo,
        )
    except Exception as e:
        typer.echo("\nTroubleshooting:", err=True)
        typer.echo("1. Check your internet connection", err=True)
        typer.echo("2. Check disk space in ~/.cache/huggingface/", err=True)
        raise fail(e, debug) from None

    typer.echo(f"✓ Model saved to {model}")
    typer.echo(f"✓ Tokenizer saved to {tokenizer}")


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a default config file."""
    path = get_config_path()
    if path.exists() and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        raise typer.Exit(1)

    typer.echo(f"Generated {generate_config(path)}")

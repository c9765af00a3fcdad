"""Configuration management for textvec.

Loads configuration from ~/.config/textvec/config.toml.
Priority chain: CLI flags > env vars > config file > defaults.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .embeddings.models import (
    DEFAULT_MODEL_PATH,
    DEFAULT_PAD_TOKEN,
    DEFAULT_TOKENIZER_PATH,
    PoolingStrategy,
)
from .engine.session import OPTIMIZATION_LEVELS
from .errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "textvec"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_OUTPUT_PATH = "./embedding.json"

DEFAULT_CONFIG = """\
# textvec configuration

[model]
# Compiled ONNX graph and its tokenizer definition
model_path = "./model.onnx"
tokenizer_path = "./tokenizer.json"

# Fixed number of inference worker threads (1 gives reproducible results)
intra_threads = 1

# Graph optimization: "disabled", "basic", "extended", "all"
optimization_level = "basic"

[embedding]
# Pooling for models that return per-token states: "mean" or "cls"
pooling = "mean"

# Add [CLS]/[SEP] style tokens while tokenizing
add_special_tokens = true

# L2-normalize embeddings
normalize = true

# Pad token used when tokenizer.json has no padding section
pad_token = "[PAD]"

[output]
# Where the CLI writes the embedding JSON array
path = "./embedding.json"
"""


@dataclass(frozen=True)
class ModelConfig:
    """Model resource configuration."""

    model_path: str
    tokenizer_path: str
    intra_threads: int
    optimization_level: str


@dataclass(frozen=True)
class EmbeddingConfig:
    """Embedding pipeline configuration."""

    pooling: PoolingStrategy
    add_special_tokens: bool
    normalize: bool
    pad_token: str


@dataclass(frozen=True)
class OutputConfig:
    """Output file configuration."""

    path: str


@dataclass(frozen=True)
class TextvecConfig:
    """Top-level textvec configuration."""

    model: ModelConfig
    embedding: EmbeddingConfig
    output: OutputConfig


_cached_config: TextvecConfig | None = None


def get_config_path() -> Path:
    """Config file location, overridable with TEXTVEC_CONFIG."""
    override = os.getenv("TEXTVEC_CONFIG")
    return Path(override) if override else CONFIG_PATH


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file and return its path."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _parse_bool(name: str, value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _parse_threads(value: str | int) -> int:
    try:
        threads = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"model.intra_threads must be an integer, got {value!r}", e) from e
    if threads < 1:
        raise ConfigError(f"model.intra_threads must be at least 1, got {threads}")
    return threads


def _parse_pooling(value: str) -> PoolingStrategy:
    try:
        return PoolingStrategy(value)
    except ValueError as e:
        choices = ", ".join(p.value for p in PoolingStrategy)
        raise ConfigError(
            f"embedding.pooling must be one of {choices}, got {value!r}", e
        ) from e


def load_config(path: Path | None = None) -> TextvecConfig:
    """Load configuration from the config file with env var overrides.

    A missing file is not an error; defaults are used instead.

    Args:
        path: Config file to read, defaults to get_config_path()

    Returns:
        Loaded and validated TextvecConfig

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid
    """
    global _cached_config
    if _cached_config is not None and path is None:
        return _cached_config

    config_path = path or get_config_path()
    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}", e) from e

    model = data.get("model", {})
    embedding = data.get("embedding", {})
    output = data.get("output", {})

    optimization_level = model.get("optimization_level", "basic")
    if optimization_level not in OPTIMIZATION_LEVELS:
        raise ConfigError(
            f"model.optimization_level must be one of {', '.join(OPTIMIZATION_LEVELS)}, "
            f"got {optimization_level!r}"
        )

    # Env vars override config file values
    config = TextvecConfig(
        model=ModelConfig(
            model_path=os.getenv(
                "TEXTVEC_MODEL_PATH", model.get("model_path", DEFAULT_MODEL_PATH)
            ),
            tokenizer_path=os.getenv(
                "TEXTVEC_TOKENIZER_PATH",
                model.get("tokenizer_path", DEFAULT_TOKENIZER_PATH),
            ),
            intra_threads=_parse_threads(
                os.getenv("TEXTVEC_THREADS", model.get("intra_threads", 1))
            ),
            optimization_level=optimization_level,
        ),
        embedding=EmbeddingConfig(
            pooling=_parse_pooling(
                os.getenv("TEXTVEC_POOLING", embedding.get("pooling", "mean"))
            ),
            add_special_tokens=_parse_bool(
                "embedding.add_special_tokens",
                embedding.get("add_special_tokens", True),
            ),
            normalize=_parse_bool("embedding.normalize", embedding.get("normalize", True)),
            pad_token=embedding.get("pad_token", DEFAULT_PAD_TOKEN),
        ),
        output=OutputConfig(
            path=os.getenv("TEXTVEC_OUTPUT", output.get("path", DEFAULT_OUTPUT_PATH)),
        ),
    )

    if path is None:
        _cached_config = config
    return config


def reset_config() -> None:
    """Forget the cached configuration."""
    global _cached_config
    _cached_config = None

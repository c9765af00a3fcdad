"""Model management for textvec - handles downloading of the ONNX graph and tokenizer."""

import logging
import shutil
from pathlib import Path

from .embeddings.models import EMBEDDING_MODEL

logger = logging.getLogger(__name__)

# Files inside the hub repository
MODEL_FILENAME = "onnx/model.onnx"
TOKENIZER_FILENAME = "tokenizer.json"


def check_models_available(model_path: str | Path, tokenizer_path: str | Path) -> bool:
    """Check if both model resources exist locally.

    Args:
        model_path: Path to the .onnx graph
        tokenizer_path: Path to tokenizer.json

    Returns:
        True if both files exist, False otherwise
    """
    return Path(model_path).is_file() and Path(tokenizer_path).is_file()


def download_models(
    model_path: str | Path,
    tokenizer_path: str | Path,
    repo_id: str = EMBEDDING_MODEL,
) -> tuple[Path, Path]:
    """Download the graph and tokenizer from the HuggingFace hub.

    Files are fetched into the hub cache and copied to the requested paths.

    Args:
        model_path: Destination for the .onnx graph
        tokenizer_path: Destination for tokenizer.json
        repo_id: Hub repository holding onnx/model.onnx and tokenizer.json

    Returns:
        Tuple of (model_path, tokenizer_path) written

    Raises:
        Exception: If the download fails
    """
    # Import here to avoid loading at module import time
    from huggingface_hub import hf_hub_download

    written = []
    for filename, destination in (
        (MODEL_FILENAME, Path(model_path)),
        (TOKENIZER_FILENAME, Path(tokenizer_path)),
    ):
        logger.info(f"Downloading {repo_id}/{filename}")
        cached = hf_hub_download(repo_id=repo_id, filename=filename)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(cached, destination)
        logger.debug(f"Copied {cached} to {destination}")
        written.append(destination)

    return written[0], written[1]


def ensure_models_available(
    model_path: str | Path, tokenizer_path: str | Path
) -> tuple[bool, str | None]:
    """Check model resources and describe how to fetch missing ones.

    Returns:
        Tuple of (models_available, error_message)
        - (True, None) if both files exist
        - (False, error_msg) if any is missing
    """
    if check_models_available(model_path, tokenizer_path):
        return True, None

    missing = [
        str(p) for p in (Path(model_path), Path(tokenizer_path)) if not p.is_file()
    ]
    error_msg = (
        f"Model resources not found: {', '.join(missing)}\n"
        "Please run:\n"
        "  textvec download-models\n"
        "\n"
        f"This downloads {EMBEDDING_MODEL} (~90MB) in ONNX form.\n"
        "You only need to do this once."
    )
    return False, error_msg

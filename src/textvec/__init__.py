"""textvec - text to sentence embeddings with an ONNX sentence-transformer."""

__version__ = "0.1.0"
__all__ = ["embed", "similarity"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "embed":
        from .api import embed

        return embed
    if name == "similarity":
        from .api import similarity

        return similarity
    raise AttributeError(f"module 'textvec' has no attribute {name!r}")

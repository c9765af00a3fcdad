"""Inference engine: tokenizer plus compiled graph behind one handle."""

from .handle import EngineHandle, load
from .session import OPTIMIZATION_LEVELS, GraphSession

__all__ = ["EngineHandle", "GraphSession", "OPTIMIZATION_LEVELS", "load"]

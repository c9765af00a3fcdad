"""Batch tokenization backed by a HuggingFace tokenizer.json resource."""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import TokenizationError
from .models import DEFAULT_PAD_TOKEN, Encoding

if TYPE_CHECKING:
    from tokenizers import Tokenizer

logger = logging.getLogger(__name__)


class TokenizerAdapter:
    """Turn batches of text into padded encodings.

    The wrapped tokenizer is configured once in the constructor (padding to
    the longest sequence of each batch) and never mutated afterwards, so a
    single adapter can be shared between threads.
    """

    def __init__(self, tokenizer: "Tokenizer", pad_token: str = DEFAULT_PAD_TOKEN):
        """Wrap a loaded tokenizer.

        Args:
            tokenizer: A ``tokenizers.Tokenizer`` instance
            pad_token: Pad token to use when the resource declares no padding

        Raises:
            TokenizationError: If padding is needed and pad_token is not in
                the tokenizer vocabulary
        """
        self._tokenizer = tokenizer

        if tokenizer.padding is None:
            pad_id = tokenizer.token_to_id(pad_token)
            if pad_id is None:
                raise TokenizationError(
                    f"Pad token {pad_token!r} is not in the tokenizer vocabulary"
                )
            tokenizer.enable_padding(pad_id=pad_id, pad_token=pad_token)
            logger.debug(f"Enabled batch padding with {pad_token!r} (id {pad_id})")

        self.pad_id: int = tokenizer.padding["pad_id"]

    @classmethod
    def from_file(
        cls, path: str | Path, pad_token: str = DEFAULT_PAD_TOKEN
    ) -> "TokenizerAdapter":
        """Load a tokenizer.json resource from local storage.

        Args:
            path: Path to the tokenizer definition
            pad_token: Pad token to use when the resource declares no padding

        Returns:
            Ready to use TokenizerAdapter

        Raises:
            TokenizationError: If the file is missing or cannot be parsed
        """
        from tokenizers import Tokenizer

        path = Path(path)
        if not path.is_file():
            raise TokenizationError(f"Tokenizer file not found: {path}")

        try:
            tokenizer = Tokenizer.from_file(str(path))
        except Exception as e:
            raise TokenizationError(
                f"Failed to load tokenizer from {path}: {e}", e
            ) from e

        logger.debug(f"Loaded tokenizer from {path}")
        return cls(tokenizer, pad_token=pad_token)

    def encode_batch(
        self, texts: Sequence[str], add_special_tokens: bool = True
    ) -> list[Encoding]:
        """Encode a batch of texts, padded to the longest encoding.

        Args:
            texts: Texts to encode, at least one
            add_special_tokens: Whether to add model-specific tokens such as
                [CLS] and [SEP]

        Returns:
            One Encoding per text, all of the same length

        Raises:
            TokenizationError: If the batch is empty, holds a non-string, or
                contains content the tokenizer cannot encode
        """
        if not texts:
            raise TokenizationError("Cannot tokenize an empty batch")

        for i, text in enumerate(texts):
            if not isinstance(text, str):
                raise TokenizationError(
                    f"Batch item {i} is {type(text).__name__}, expected str"
                )

        try:
            raw = self._tokenizer.encode_batch(
                list(texts), add_special_tokens=add_special_tokens
            )
        except Exception as e:
            raise TokenizationError(f"Failed to encode batch: {e}", e) from e

        encodings = [
            Encoding(
                ids=tuple(enc.ids),
                attention_mask=tuple(enc.attention_mask),
                type_ids=tuple(enc.type_ids),
            )
            for enc in raw
        ]
        logger.debug(
            f"Encoded {len(encodings)} texts, padded length {len(encodings[0])}"
        )
        return encodings

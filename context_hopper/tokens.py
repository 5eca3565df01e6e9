"""Token estimation against a target tokenizer model."""

from __future__ import annotations

import logging
import math
from typing import Protocol

import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4"


class Encoding(Protocol):
    def encode(self, text: str, **kwargs) -> list[int]: ...


def heuristic_count(text: str) -> int:
    """Deterministic fallback: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class TokenEstimator:
    """Counts tokens with tiktoken, falling back to ``heuristic_count``.

    The encoding is loaded lazily on first use. If it cannot be loaded
    (unknown model, or BPE ranks not cached and not downloadable) the
    estimator logs once and uses the heuristic from then on.
    """

    def __init__(self, model: str | None = DEFAULT_MODEL, encoding: Encoding | None = None):
        """Initialize estimator.

        Args:
            model: tiktoken model name; None forces the heuristic
            encoding: Pre-built encoding (skips loading by model name)
        """
        self.model = model
        self._encoding = encoding
        self._load_attempted = encoding is not None or model is None

    @classmethod
    def heuristic(cls) -> TokenEstimator:
        return cls(model=None)

    @property
    def uses_tokenizer(self) -> bool:
        return self._get_encoding() is not None

    def _get_encoding(self) -> Encoding | None:
        if not self._load_attempted:
            self._load_attempted = True
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except Exception as e:
                logger.warning(f"Tokenizer for model '{self.model}' unavailable, estimating from length: {e}")
                self._encoding = None
        return self._encoding

    def estimate(self, text: str) -> int:
        """Return the token count of ``text``."""
        encoding = self._get_encoding()
        if encoding is None:
            return heuristic_count(text)
        # Special-token markers in user text are counted as plain text
        return len(encoding.encode(text, disallowed_special=()))

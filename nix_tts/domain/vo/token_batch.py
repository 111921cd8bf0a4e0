from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class TokenBatch:
    tokens: tuple[tuple[int, ...], ...]
    lengths: tuple[int, ...]
    phonemes: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def max_length(self) -> int:
        return max(self.lengths, default=0)

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(tokens[B, T], lengths[B])`` as int64 arrays for the encoder."""
        tokens = np.asarray(self.tokens, dtype=np.int64).reshape(len(self.tokens), self.max_length)
        lengths = np.asarray(self.lengths, dtype=np.int64)
        return tokens, lengths

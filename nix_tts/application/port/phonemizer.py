from __future__ import annotations

from typing import Protocol, Sequence


class Phonemizer(Protocol):
    def phonemize(self, text: str) -> Sequence[str]:
        """Return phoneme transcriptions for text (one entry per segment)."""
        ...

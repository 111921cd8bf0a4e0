from __future__ import annotations

from typing import Protocol

import numpy as np

AudioArray = np.ndarray


class AudioOutput(Protocol):
    def play(self, samples: AudioArray, sample_rate: int) -> None:
        """Start playing mono float32 samples; returns without waiting for completion."""
        ...

    def wait(self) -> None:
        """Block until everything queued so far has been played."""
        ...

    def interrupt(self) -> None:
        """Stop the clip that is currently playing."""
        ...

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class EncoderOutputs:
    """Encoder results under one stable contract.

    ``latent`` is the tensor the decoder consumes; ``outputs`` keeps every
    encoder output by name (masks, durations) for callers that need them.
    """

    latent: np.ndarray
    outputs: Mapping[str, np.ndarray] = field(default_factory=dict)

    def get(self, name: str) -> np.ndarray | None:
        return self.outputs.get(name)

from __future__ import annotations

from pathlib import Path

import numpy as np
from scipy.io.wavfile import write


def write_wav(path: str | Path, samples: np.ndarray, sample_rate: int) -> Path:
    """Write mono samples as a 32-bit float WAV file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    audio = np.asarray(samples, dtype=np.float32).reshape(-1)
    write(str(path), sample_rate, audio)
    return path

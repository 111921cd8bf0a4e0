from __future__ import annotations

from typing import Mapping, Protocol

import numpy as np

from nix_tts.domain.vo.encoder_outputs import EncoderOutputs


class SpeechModel(Protocol):
    def load(self) -> None:
        """Load the encoder and decoder sessions."""
        ...

    def run_encoder(self, tokens: np.ndarray, lengths: np.ndarray) -> EncoderOutputs:
        """Encode int64 tokens [batch, max_len] with int64 lengths [batch]."""
        ...

    def run_decoder(
        self,
        latent: np.ndarray,
        *,
        masks: Mapping[str, np.ndarray] | None = None,
        speaker_id: int | None = None,
    ) -> np.ndarray:
        """Decode a latent into a raw waveform tensor."""
        ...

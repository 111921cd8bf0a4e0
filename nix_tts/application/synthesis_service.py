from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from nix_tts.application.errors import ModelNotLoadedError
from nix_tts.application.port.audio_output import AudioOutput
from nix_tts.application.port.speech_model import SpeechModel
from nix_tts.application.tokenizer import Tokenizer
from nix_tts.domain.vo.token_batch import TokenBatch
from nix_tts.infrastructure.audio.wav_writer import write_wav
from nix_tts.utils.logger import Logger

DEFAULT_SAMPLE_RATE = 22_050


@dataclass
class SynthesisService:
    tokenizer: Tokenizer
    speech_model: SpeechModel
    audio_output: AudioOutput | None = None
    sample_rate: int = DEFAULT_SAMPLE_RATE
    logger: Logger | None = None

    _loaded: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def init(self) -> None:
        """Load the encoder and decoder once; later calls are no-ops."""
        if self._loaded:
            return
        self.speech_model.load()
        self._loaded = True
        self._log("[TTS] Speech model ready.")

    def tokenize(self, text: str) -> TokenBatch:
        return self.tokenizer.tokenize([text])

    def vocalize(self, text: str, speaker_id: int | None = None) -> np.ndarray:
        """Synthesize text into a 1-D float32 waveform at ``sample_rate``."""
        if not self._loaded:
            raise ModelNotLoadedError("SynthesisService.init() must be called before vocalize().")

        batch = self.tokenizer.tokenize([text])
        self._log(f"[TTS] Phonemes: {batch.phonemes[0]!r} ({batch.lengths[0]} tokens)")

        tokens, lengths = batch.as_arrays()
        encoded = self.speech_model.run_encoder(tokens, lengths)

        masks = {name: value for name, value in encoded.outputs.items() if "mask" in name}
        waveform = self.speech_model.run_decoder(
            encoded.latent,
            masks=masks or None,
            speaker_id=speaker_id,
        )

        samples = np.asarray(waveform, dtype=np.float32).reshape(-1)
        self._log(f"[TTS] Synthesized {samples.size} samples ({samples.size / self.sample_rate:.2f}s).")
        return samples

    def speak(self, text: str, speaker_id: int | None = None) -> np.ndarray:
        if self.audio_output is None:
            raise RuntimeError("No audio output configured for playback.")

        samples = self.vocalize(text, speaker_id=speaker_id)
        self.audio_output.play(samples, self.sample_rate)
        return samples

    def save(self, text: str, path: str | Path, speaker_id: int | None = None) -> Path:
        return self.write(self.vocalize(text, speaker_id=speaker_id), path)

    def write(self, samples: np.ndarray, path: str | Path) -> Path:
        """Write already synthesized samples as a WAV file at ``sample_rate``."""
        written = write_wav(path, samples, self.sample_rate)
        self._log(f"[TTS] Wrote {samples.size} samples to {written}")
        return written

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)

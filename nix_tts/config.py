from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from nix_tts.domain.vo.tokenizer_state import TokenizerState
from nix_tts.infrastructure.onnx.model_cache import DEFAULT_CACHE_DIR
from nix_tts.infrastructure.onnx.speech_model import OutputSelector, parse_output_selector
from nix_tts.utils.env import get_int

DEFAULT_SAMPLE_RATE = 22_050
DEFAULT_LANGUAGE = "en-us"
DEFAULT_LATENT_OUTPUT: OutputSelector = 2
DEFAULT_WAVEFORM_OUTPUT: OutputSelector = 0


@dataclass(frozen=True)
class ModelConfig:
    encoder_path: str
    decoder_path: str
    latent_output: OutputSelector = DEFAULT_LATENT_OUTPUT
    waveform_output: OutputSelector = DEFAULT_WAVEFORM_OUTPUT
    cache_dir: Path = DEFAULT_CACHE_DIR


@dataclass(frozen=True)
class AppConfig:
    model: ModelConfig | None
    tokenizer_state_file: str | None = None
    language: str = DEFAULT_LANGUAGE
    sample_rate: int = DEFAULT_SAMPLE_RATE

    @staticmethod
    def from_env(*, require_model: bool = True) -> "AppConfig":
        encoder_path = os.getenv("NIX_TTS_ENCODER_PATH") or None
        decoder_path = os.getenv("NIX_TTS_DECODER_PATH") or None

        model: ModelConfig | None = None
        if encoder_path and decoder_path:
            model = ModelConfig(
                encoder_path=encoder_path,
                decoder_path=decoder_path,
                latent_output=_get_selector("NIX_TTS_LATENT_OUTPUT", DEFAULT_LATENT_OUTPUT),
                waveform_output=_get_selector("NIX_TTS_WAVEFORM_OUTPUT", DEFAULT_WAVEFORM_OUTPUT),
                cache_dir=Path(os.getenv("NIX_TTS_MODEL_CACHE") or DEFAULT_CACHE_DIR),
            )
        elif encoder_path or decoder_path:
            raise ValueError("NIX_TTS_ENCODER_PATH and NIX_TTS_DECODER_PATH must be set together.")
        elif require_model:
            raise ValueError("NIX_TTS_ENCODER_PATH and NIX_TTS_DECODER_PATH are required.")

        sample_rate = get_int("NIX_TTS_SAMPLE_RATE", DEFAULT_SAMPLE_RATE)
        if sample_rate <= 0:
            raise ValueError("NIX_TTS_SAMPLE_RATE must be a positive integer.")

        return AppConfig(
            model=model,
            tokenizer_state_file=os.getenv("NIX_TTS_TOKENIZER_STATE") or None,
            language=os.getenv("NIX_TTS_LANGUAGE") or DEFAULT_LANGUAGE,
            sample_rate=sample_rate,
        )

    def resolve_tokenizer_state(self) -> TokenizerState:
        """Load the tokenizer state file if configured, else the bundled default."""
        if not self.tokenizer_state_file:
            return TokenizerState.default()
        return TokenizerState.from_json_file(self.tokenizer_state_file)


def _get_selector(name: str, default: OutputSelector) -> OutputSelector:
    raw = os.getenv(name)
    if not raw or not raw.strip():
        return default
    return parse_output_selector(raw)

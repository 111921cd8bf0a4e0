from __future__ import annotations

from dataclasses import dataclass

from nix_tts.application.port.audio_output import AudioOutput
from nix_tts.application.port.phonemizer import Phonemizer
from nix_tts.application.port.speech_model import SpeechModel
from nix_tts.application.synthesis_service import SynthesisService
from nix_tts.application.tokenizer import Tokenizer
from nix_tts.config import AppConfig
from nix_tts.domain.vo.tokenizer_state import TokenizerState
from nix_tts.infrastructure.espeak.phonemizer import EspeakPhonemizer
from nix_tts.infrastructure.onnx.speech_model import OnnxSpeechModel
from nix_tts.utils.logger import Logger


@dataclass(frozen=True)
class AppContainer:
    config: AppConfig
    logger: Logger
    tokenizer_state: TokenizerState
    phonemizer: Phonemizer
    tokenizer: Tokenizer
    speech_model: SpeechModel | None
    audio_output: AudioOutput | None
    synthesis_service: SynthesisService | None


def build_container(
    config: AppConfig,
    *,
    logger: Logger | None = None,
    tokenizer_state: TokenizerState | None = None,
    phonemizer: Phonemizer | None = None,
    speech_model: SpeechModel | None = None,
    audio_output: AudioOutput | None = None,
    with_audio_output: bool = True,
) -> AppContainer:
    logger = logger or Logger()
    tokenizer_state = tokenizer_state or config.resolve_tokenizer_state()
    phonemizer = phonemizer or EspeakPhonemizer(language=config.language, logger=logger)

    tokenizer = Tokenizer(tokenizer_state, phonemizer, logger=logger)

    if speech_model is None and config.model is not None:
        speech_model = OnnxSpeechModel(
            encoder_path=config.model.encoder_path,
            decoder_path=config.model.decoder_path,
            latent_output=config.model.latent_output,
            waveform_output=config.model.waveform_output,
            cache_dir=config.model.cache_dir,
            logger=logger,
        )

    if audio_output is None and with_audio_output:
        # sounddevice needs PortAudio at import time; only load it when playing.
        from nix_tts.infrastructure.audio.speaker import Speaker

        audio_output = Speaker(logger=logger)

    synthesis_service: SynthesisService | None = None
    if speech_model is not None:
        synthesis_service = SynthesisService(
            tokenizer=tokenizer,
            speech_model=speech_model,
            audio_output=audio_output,
            sample_rate=config.sample_rate,
            logger=logger,
        )

    return AppContainer(
        config=config,
        logger=logger,
        tokenizer_state=tokenizer_state,
        phonemizer=phonemizer,
        tokenizer=tokenizer,
        speech_model=speech_model,
        audio_output=audio_output,
        synthesis_service=synthesis_service,
    )

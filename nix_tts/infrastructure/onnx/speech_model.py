from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import numpy as np

from nix_tts.application.errors import MissingDependencyError, ModelNotLoadedError
from nix_tts.domain.vo.encoder_outputs import EncoderOutputs
from nix_tts.infrastructure.onnx.model_cache import DEFAULT_CACHE_DIR, resolve_model_path
from nix_tts.utils.logger import Logger

if TYPE_CHECKING:
    from onnxruntime import InferenceSession

OutputSelector = int | str

CPU_PROVIDERS = ["CPUExecutionProvider"]


class OnnxSpeechModel:
    """Encoder/decoder pair executed with onnxruntime on CPU.

    Exports differ in how their outputs are named, so the latent and the
    waveform are picked by a configured index or name and handed to the
    caller under one contract.
    """

    def __init__(
        self,
        *,
        encoder_path: str,
        decoder_path: str,
        latent_output: OutputSelector = 2,
        waveform_output: OutputSelector = 0,
        token_input: str = "c",
        length_input: str = "c_lengths",
        latent_input: str = "z",
        speaker_input: str = "sid",
        cache_dir: Path = DEFAULT_CACHE_DIR,
        logger: Logger | None = None,
    ) -> None:
        self.encoder_path = encoder_path
        self.decoder_path = decoder_path
        self.latent_output = latent_output
        self.waveform_output = waveform_output
        self.token_input = token_input
        self.length_input = length_input
        self.latent_input = latent_input
        self.speaker_input = speaker_input
        self.cache_dir = cache_dir
        self._logger = logger

        self._encoder: InferenceSession | None = None
        self._decoder: InferenceSession | None = None

    @property
    def is_loaded(self) -> bool:
        return self._encoder is not None and self._decoder is not None

    def load(self) -> None:
        if self.is_loaded:
            return

        try:
            import onnxruntime as ort
        except ModuleNotFoundError as e:
            raise MissingDependencyError(
                "ONNX inference requires 'onnxruntime'. Install it with: pip install onnxruntime"
            ) from e

        encoder_file = resolve_model_path(self.encoder_path, cache_dir=self.cache_dir, logger=self._logger)
        decoder_file = resolve_model_path(self.decoder_path, cache_dir=self.cache_dir, logger=self._logger)

        self._log(f"[ONNX] Loading encoder: {encoder_file}")
        encoder = ort.InferenceSession(encoder_file, providers=CPU_PROVIDERS)
        self._log(f"[ONNX] Loading decoder: {decoder_file}")
        decoder = ort.InferenceSession(decoder_file, providers=CPU_PROVIDERS)

        self._encoder = encoder
        self._decoder = decoder
        self._log(
            "[ONNX] Models loaded: "
            f"encoder outputs={_names(encoder.get_outputs())}, "
            f"decoder inputs={_names(decoder.get_inputs())}"
        )

    def run_encoder(self, tokens: np.ndarray, lengths: np.ndarray) -> EncoderOutputs:
        encoder = self._require(self._encoder, "encoder")

        feeds = {
            self.token_input: np.asarray(tokens, dtype=np.int64),
            self.length_input: np.asarray(lengths, dtype=np.int64),
        }
        results = encoder.run(None, feeds)
        names = _names(encoder.get_outputs())
        outputs = dict(zip(names, results))

        latent = _select(results, names, self.latent_output, role="encoder latent")
        return EncoderOutputs(latent=latent, outputs=outputs)

    def run_decoder(
        self,
        latent: np.ndarray,
        *,
        masks: Mapping[str, np.ndarray] | None = None,
        speaker_id: int | None = None,
    ) -> np.ndarray:
        decoder = self._require(self._decoder, "decoder")
        accepted = set(_names(decoder.get_inputs()))

        feeds: dict[str, Any] = {self.latent_input: latent}
        for name, mask in (masks or {}).items():
            if name in accepted and name != self.latent_input:
                feeds[name] = mask

        if speaker_id is not None:
            if self.speaker_input not in accepted:
                raise ValueError(
                    f"Decoder {self.decoder_path} has no '{self.speaker_input}' input; "
                    "it does not support speaker ids."
                )
            feeds[self.speaker_input] = np.asarray([speaker_id], dtype=np.int64)

        results = decoder.run(None, feeds)
        names = _names(decoder.get_outputs())
        return _select(results, names, self.waveform_output, role="decoder waveform")

    def _require(self, session: InferenceSession | None, role: str) -> InferenceSession:
        if session is None:
            raise ModelNotLoadedError(f"The {role} session is not loaded; call load() first.")
        return session

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)


def inference_errors() -> tuple[type[Exception], ...]:
    """onnxruntime's native error types, which do not derive from OSError or RuntimeError."""
    try:
        from onnxruntime.capi.onnxruntime_pybind11_state import (
            Fail,
            InvalidArgument,
            InvalidGraph,
            NoSuchFile,
            RuntimeException,
        )
    except ModuleNotFoundError:
        return ()
    return (Fail, InvalidArgument, InvalidGraph, NoSuchFile, RuntimeException)


def _names(nodes: Sequence[Any]) -> list[str]:
    return [node.name for node in nodes]


def _select(
    results: Sequence[np.ndarray],
    names: Sequence[str],
    selector: OutputSelector,
    *,
    role: str,
) -> np.ndarray:
    if isinstance(selector, int):
        if not -len(results) <= selector < len(results):
            raise ValueError(
                f"{role} output index {selector} is out of range; model has {len(results)} outputs {list(names)}."
            )
        return results[selector]

    if selector not in names:
        raise ValueError(f"{role} output '{selector}' not found; model outputs are {list(names)}.")
    return results[list(names).index(selector)]


def parse_output_selector(raw: str) -> OutputSelector:
    """Read an output selector: digits are a positional index, anything else a name."""
    raw = raw.strip()
    if raw.lstrip("-").isdigit():
        return int(raw)
    return raw

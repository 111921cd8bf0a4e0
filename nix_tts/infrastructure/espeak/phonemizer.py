from __future__ import annotations

from typing import TYPE_CHECKING

from nix_tts.application.errors import MissingDependencyError
from nix_tts.utils.logger import Logger

if TYPE_CHECKING:
    from phonemizer.backend import EspeakBackend


class EspeakPhonemizer:
    """Phonemizer port backed by espeak(-ng) through the ``phonemizer`` package.

    The backend is created once; espeak errors (unsupported language, missing
    shared library) are raised unchanged.
    """

    def __init__(
        self,
        *,
        language: str = "en-us",
        preserve_punctuation: bool = True,
        with_stress: bool = True,
        logger: Logger | None = None,
    ) -> None:
        self.language = language
        self._logger = logger

        try:
            from phonemizer.backend import EspeakBackend as _EspeakBackend
        except ModuleNotFoundError as e:
            raise MissingDependencyError(
                "The espeak phonemizer requires the 'phonemizer' package "
                "and an espeak-ng installation. Install it with: pip install phonemizer"
            ) from e

        self._log(f"[Phonemizer] Initializing espeak backend: language={language}")
        self._backend: EspeakBackend = _EspeakBackend(
            language=language,
            preserve_punctuation=preserve_punctuation,
            with_stress=with_stress,
        )

    def phonemize(self, text: str) -> list[str]:
        return list(self._backend.phonemize([text], strip=True))

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar

from nix_tts.application.port.phonemizer import Phonemizer
from nix_tts.application.text_normalizer import TextNormalizer
from nix_tts.domain.vo.token_batch import TokenBatch
from nix_tts.domain.vo.tokenizer_state import PAD_ID, TokenizerState
from nix_tts.utils.logger import Logger

T = TypeVar("T")


def intersperse(items: Sequence[T], item: T) -> list[T]:
    """Place ``item`` between, before and after every element of ``items``."""
    result = [item] * (len(items) * 2 + 1)
    result[1::2] = items
    return result


def pad_tokens(
    sequences: Sequence[Sequence[int]],
    pad: int = PAD_ID,
) -> tuple[list[list[int]], list[int]]:
    """Right-pad sequences to the longest one; return (padded, original lengths)."""
    lengths = [len(sequence) for sequence in sequences]
    max_len = max(lengths, default=0)
    padded = [list(sequence) + [pad] * (max_len - len(sequence)) for sequence in sequences]
    return padded, lengths


class Tokenizer:
    def __init__(
        self,
        state: TokenizerState | Mapping[str, Any],
        phonemizer: Phonemizer,
        *,
        join_segments: bool = False,
        logger: Logger | None = None,
    ) -> None:
        if not isinstance(state, TokenizerState):
            state = TokenizerState.from_dict(state)

        self.state = state
        self.phonemizer = phonemizer
        self.join_segments = join_segments
        self.normalizer = TextNormalizer(state)
        self._logger = logger

    def tokenize(self, texts: Sequence[str]) -> TokenBatch:
        if isinstance(texts, str):
            raise TypeError("tokenize() expects a sequence of strings, not a single string.")
        for index, text in enumerate(texts):
            if not isinstance(text, str):
                raise TypeError(
                    f"Text at index {index} must be a string, got {type(text).__name__}."
                )

        phonemes = [self.phonemize(text) for text in texts]
        sequences = [intersperse(self.encode(phoneme), PAD_ID) for phoneme in phonemes]
        padded, lengths = pad_tokens(sequences)

        return TokenBatch(
            tokens=tuple(tuple(sequence) for sequence in padded),
            lengths=tuple(lengths),
            phonemes=tuple(phonemes),
        )

    def phonemize(self, text: str) -> str:
        """Normalize text and return its whitespace-collapsed phoneme string."""
        normalized = self.normalizer.normalize(text)
        if not normalized:
            return ""

        segments = list(self.phonemizer.phonemize(normalized))
        if not segments:
            return ""

        if self.join_segments:
            phoneme = " ".join(segments)
        else:
            phoneme = segments[0]
            if len(segments) > 1:
                self._log(
                    f"[Tokenizer] Phonemizer returned {len(segments)} segments; "
                    f"only the first is used ({len(segments) - 1} dropped)."
                )

        return self.normalizer.collapse_whitespace(phoneme)

    def encode(self, phonemes: str) -> list[int]:
        """Map each character to its vocabulary id, dropping unknown characters."""
        vocab = self.state.vocab_dict
        return [vocab[char] for char in phonemes if char in vocab]

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)

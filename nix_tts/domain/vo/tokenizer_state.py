from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from nix_tts.application.errors import TokenizerConfigError
from nix_tts.utils.text import read_json_file

PAD_ID = 0
DEFAULT_WHITESPACE_REGEX = r"\s+"

DEFAULT_ABBREVIATIONS: dict[str, str] = {
    "mrs": "misess",
    "mr": "mister",
    "dr": "doctor",
    "st": "saint",
    "co": "company",
    "jr": "junior",
    "maj": "major",
    "gen": "general",
    "drs": "doctors",
    "rev": "reverend",
    "lt": "lieutenant",
    "hon": "honorable",
    "sgt": "sergeant",
    "capt": "captain",
    "esq": "esquire",
    "ltd": "limited",
    "col": "colonel",
    "ft": "fort",
}

_DEFAULT_SYMBOLS = (
    [" ", "!", '"', "'", "(", ")", ",", "-", ".", ":", ";", "?"]
    + list("abcdefghijklmnopqrstuvwxyz")
    + list("æçðøħŋœǀǃɐɑɒɓɔɕɖɗɘəɚɛɜɞɟɠɡɢɣɤɥɦɧɨɩɪɫɬɭɮɯɰɱɲɳɴɵɶɸɹɺɻɽɾʀʁʂʃʄʈʉʊʋʌʍʎʏʐʑʒʔʕʘʙʛʜʝʟʡʢ")
    + ["əʊ"]
)

# Ids start at 1; 0 is the separator/padding sentinel.
DEFAULT_VOCAB: dict[str, int] = {
    symbol: index for index, symbol in enumerate(_DEFAULT_SYMBOLS, start=1)
}


@dataclass(frozen=True)
class TokenizerState:
    """Immutable tokenizer configuration.

    ``vocab_dict`` maps phoneme symbols to positive ids, ``abbreviations_dict``
    maps lowercase abbreviations (without the trailing period) to their
    expansion, and ``whitespace_regex`` matches the runs collapsed to one space.
    Mappings are copied into read-only views, keeping their iteration order.
    """

    vocab_dict: Mapping[str, int]
    abbreviations_dict: Mapping[str, str] = field(default_factory=dict)
    whitespace_regex: str = DEFAULT_WHITESPACE_REGEX

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocab_dict", _validate_vocab(self.vocab_dict))
        object.__setattr__(
            self,
            "abbreviations_dict",
            _validate_abbreviations(self.abbreviations_dict),
        )
        _validate_pattern(self.whitespace_regex)

    @staticmethod
    def default() -> "TokenizerState":
        return TokenizerState(
            vocab_dict=DEFAULT_VOCAB,
            abbreviations_dict=DEFAULT_ABBREVIATIONS,
            whitespace_regex=DEFAULT_WHITESPACE_REGEX,
        )

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "TokenizerState":
        if not isinstance(data, Mapping):
            raise TokenizerConfigError(
                f"Tokenizer state must be a mapping, got {type(data).__name__}."
            )
        if "vocab_dict" not in data:
            raise TokenizerConfigError("Tokenizer state is missing 'vocab_dict'.")

        return TokenizerState(
            vocab_dict=data["vocab_dict"],
            abbreviations_dict=data.get("abbreviations_dict", {}),
            whitespace_regex=data.get("whitespace_regex", DEFAULT_WHITESPACE_REGEX),
        )

    @staticmethod
    def from_json_file(path: str | Path) -> "TokenizerState":
        try:
            data = read_json_file(path)
        except ValueError as exc:
            raise TokenizerConfigError(f"Tokenizer state file {path} is not valid JSON: {exc}") from exc
        return TokenizerState.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "vocab_dict": dict(self.vocab_dict),
            "abbreviations_dict": dict(self.abbreviations_dict),
            "whitespace_regex": self.whitespace_regex,
        }


def _validate_vocab(vocab: Any) -> Mapping[str, int]:
    if not isinstance(vocab, Mapping):
        raise TokenizerConfigError(
            f"vocab_dict must be a mapping, got {type(vocab).__name__}."
        )

    seen: dict[int, str] = {}
    for symbol, token_id in vocab.items():
        if not isinstance(symbol, str) or not symbol:
            raise TokenizerConfigError(f"Vocabulary key {symbol!r} must be a non-empty string.")
        # bool is an int subclass; reject it explicitly.
        if isinstance(token_id, bool) or not isinstance(token_id, int):
            raise TokenizerConfigError(
                f"Vocabulary id for {symbol!r} must be an integer, got {token_id!r}."
            )
        if token_id <= PAD_ID:
            raise TokenizerConfigError(
                f"Vocabulary id for {symbol!r} must be positive (0 is reserved for padding), got {token_id}."
            )
        if token_id in seen:
            raise TokenizerConfigError(
                f"Vocabulary id {token_id} is used by both {seen[token_id]!r} and {symbol!r}."
            )
        seen[token_id] = symbol

    return MappingProxyType(dict(vocab))


def _validate_abbreviations(abbreviations: Any) -> Mapping[str, str]:
    if not isinstance(abbreviations, Mapping):
        raise TokenizerConfigError(
            f"abbreviations_dict must be a mapping, got {type(abbreviations).__name__}."
        )

    for key, expansion in abbreviations.items():
        if not isinstance(key, str) or not key:
            raise TokenizerConfigError(f"Abbreviation key {key!r} must be a non-empty string.")
        if not isinstance(expansion, str):
            raise TokenizerConfigError(
                f"Expansion for abbreviation {key!r} must be a string, got {expansion!r}."
            )

    return MappingProxyType(dict(abbreviations))


def _validate_pattern(pattern: Any) -> None:
    if not isinstance(pattern, str) or not pattern:
        raise TokenizerConfigError("whitespace_regex must be a non-empty string.")
    try:
        re.compile(pattern)
    except re.error as exc:
        raise TokenizerConfigError(f"whitespace_regex {pattern!r} is invalid: {exc}") from exc

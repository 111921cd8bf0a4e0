from __future__ import annotations

import re

from nix_tts.domain.vo.tokenizer_state import TokenizerState


class TextNormalizer:
    """Lowercase, expand abbreviations and collapse whitespace.

    Abbreviations match only as ``\\b<key>.`` and are applied one key at a
    time in table order, so overlapping keys depend on that order.
    """

    def __init__(self, state: TokenizerState):
        self.state = state
        self._whitespace_pattern = re.compile(state.whitespace_regex)
        self._abbreviations: list[tuple[re.Pattern[str], str]] = [
            (re.compile(rf"\b{re.escape(key)}\.", re.ASCII), expansion)
            for key, expansion in state.abbreviations_dict.items()
        ]

    def normalize(self, text: str) -> str:
        text = self.expand_abbreviations(text.lower())
        return self.collapse_whitespace(text)

    def expand_abbreviations(self, text: str) -> str:
        for pattern, expansion in self._abbreviations:
            # A callable replacement keeps backslashes in the expansion literal.
            text = pattern.sub(lambda _match, value=expansion: value, text)
        return text

    def collapse_whitespace(self, text: str) -> str:
        return self._whitespace_pattern.sub(" ", text)

from __future__ import annotations


class TokenizerConfigError(ValueError):
    """Raised when a tokenizer state (vocabulary, abbreviations, pattern) is malformed."""


class ModelNotLoadedError(RuntimeError):
    """Raised when synthesis is requested before the speech model was loaded."""


class MissingDependencyError(ImportError):
    """Raised when an optional runtime backend (espeak phonemizer, onnxruntime) is not installed."""

"""Unit tests for TokenizerState."""
from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from nix_tts.application.errors import TokenizerConfigError
from nix_tts.domain.vo.tokenizer_state import PAD_ID, TokenizerState


class TestDefaultTokenizerState(unittest.TestCase):
    def setUp(self):
        self.state = TokenizerState.default()

    def test_vocab_ids_are_unique_and_non_zero(self):
        ids = list(self.state.vocab_dict.values())

        self.assertEqual(len(ids), 118)
        self.assertEqual(len(set(ids)), len(ids))
        self.assertNotIn(PAD_ID, ids)
        self.assertEqual(sorted(ids), list(range(1, 119)))

    def test_known_entries(self):
        vocab = self.state.vocab_dict

        self.assertEqual(vocab[" "], 1)
        self.assertEqual(vocab["?"], 12)
        self.assertEqual(vocab["a"], 13)
        self.assertEqual(vocab["z"], 38)
        self.assertEqual(vocab["æ"], 39)
        self.assertEqual(vocab["ʢ"], 117)
        self.assertEqual(vocab["əʊ"], 118)

    def test_abbreviations(self):
        abbreviations = self.state.abbreviations_dict

        self.assertEqual(len(abbreviations), 18)
        self.assertEqual(abbreviations["mr"], "mister")
        self.assertEqual(list(abbreviations)[:2], ["mrs", "mr"])

    def test_whitespace_regex(self):
        self.assertEqual(self.state.whitespace_regex, r"\s+")


class TestTokenizerStateValidation(unittest.TestCase):
    def test_mappings_are_read_only(self):
        state = TokenizerState(vocab_dict={"a": 1}, abbreviations_dict={"mr": "mister"})

        with self.assertRaises(TypeError):
            state.vocab_dict["b"] = 2  # type: ignore[index]
        with self.assertRaises(TypeError):
            state.abbreviations_dict["dr"] = "doctor"  # type: ignore[index]

    def test_source_dict_is_copied(self):
        vocab = {"a": 1}
        state = TokenizerState(vocab_dict=vocab)
        vocab["b"] = 2

        self.assertNotIn("b", state.vocab_dict)

    def test_rejects_non_mapping_vocab(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict=["a", "b"])  # type: ignore[arg-type]

    def test_rejects_zero_id(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": 0})

    def test_rejects_negative_id(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": -3})

    def test_rejects_non_integer_id(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": "1"})  # type: ignore[dict-item]
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": True})

    def test_rejects_duplicate_ids(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": 1, "b": 1})

    def test_rejects_empty_symbol(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"": 1})

    def test_rejects_non_mapping_abbreviations(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": 1}, abbreviations_dict="mr")  # type: ignore[arg-type]

    def test_rejects_non_string_expansion(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": 1}, abbreviations_dict={"mr": 1})  # type: ignore[dict-item]

    def test_rejects_invalid_pattern(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState(vocab_dict={"a": 1}, whitespace_regex="(")

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(TokenizerConfigError, ValueError))


class TestTokenizerStateLoading(unittest.TestCase):
    def test_from_dict_uses_defaults_for_optional_keys(self):
        state = TokenizerState.from_dict({"vocab_dict": {"a": 1}})

        self.assertEqual(dict(state.abbreviations_dict), {})
        self.assertEqual(state.whitespace_regex, r"\s+")

    def test_from_dict_requires_vocab(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState.from_dict({"abbreviations_dict": {}})

    def test_from_dict_rejects_non_mapping(self):
        with self.assertRaises(TokenizerConfigError):
            TokenizerState.from_dict([1, 2])  # type: ignore[arg-type]

    def test_from_json_file_round_trips_default(self):
        default = TokenizerState.default()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "tokenizer_state.json"
            path.write_text(json.dumps(default.to_dict(), ensure_ascii=False), encoding="utf-8")

            loaded = TokenizerState.from_json_file(path)

        self.assertEqual(dict(loaded.vocab_dict), dict(default.vocab_dict))
        self.assertEqual(list(loaded.abbreviations_dict), list(default.abbreviations_dict))
        self.assertEqual(loaded.whitespace_regex, default.whitespace_regex)

    def test_from_json_file_rejects_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text("{not json", encoding="utf-8")

            with self.assertRaises(TokenizerConfigError):
                TokenizerState.from_json_file(path)

    def test_from_json_file_rejects_bad_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json"
            path.write_text(json.dumps({"vocab_dict": {"a": 0}}), encoding="utf-8")

            with self.assertRaises(TokenizerConfigError):
                TokenizerState.from_json_file(path)


if __name__ == "__main__":
    unittest.main()

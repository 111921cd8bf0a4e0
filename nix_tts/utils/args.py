from __future__ import annotations

import argparse


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synthesize speech with Nix-TTS ONNX models")
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to speak. If omitted, read from stdin.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env). Use empty to disable.",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the waveform to this WAV file.",
    )
    parser.add_argument(
        "--no-play",
        action="store_true",
        help="Do not play the waveform on the default output device.",
    )
    parser.add_argument(
        "--speaker-id",
        type=int,
        default=None,
        help="Speaker id for multi-speaker decoders.",
    )
    parser.add_argument(
        "--tokens-only",
        action="store_true",
        help="Print phonemes, tokens and lengths without loading the models.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print log lines to stderr.",
    )
    parser.add_argument(
        "--save-log",
        action="store_true",
        help="Save the session log under logs/.",
    )
    return parser.parse_args(argv)

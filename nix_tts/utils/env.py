from __future__ import annotations

import os

from dotenv import load_dotenv as dotenv_load_dotenv


def load_dotenv(env_file: str | None) -> None:
    """Load environment variables from a dotenv file if one is given.

    Variables already present in the process environment win.
    """

    if not env_file:
        return

    dotenv_load_dotenv(env_file, override=False)


def get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc

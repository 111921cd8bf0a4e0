from __future__ import annotations

from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Callable, NamedTuple


class LogRecord(NamedTuple):
    at: datetime
    message: str

    def format(self) -> str:
        return f"{self.at:%H:%M:%S.%f}"[:-3] + f" {self.message}"


class Logger:
    """Session log shared by the pipeline stages.

    Lines are buffered (the oldest are dropped past ``max_lines``), forwarded
    to an optional ``on_emit`` subscriber and written with timestamps by
    ``save``. Stages tag their lines, e.g. ``[ONNX] Loading encoder``.
    """

    def __init__(
        self,
        *,
        log_dir: Path = Path("logs"),
        max_lines: int | None = 10_000,
        on_emit: Callable[[str], None] | None = None,
    ):
        self.log_dir = log_dir
        self._on_emit: Callable[[str], None] | None = None

        self._records: deque[LogRecord] = deque(maxlen=max_lines)
        self._started_at = datetime.now()

        # Lines logged before the first subscriber attaches are replayed to it.
        self.on_emit = on_emit

    @property
    def on_emit(self) -> Callable[[str], None] | None:
        return self._on_emit

    @on_emit.setter
    def on_emit(self, callback: Callable[[str], None] | None) -> None:
        should_replay = self._on_emit is None and callback is not None
        self._on_emit = callback

        if should_replay:
            for record in self._records:
                callback(record.message)

    @property
    def lines(self) -> list[str]:
        return [record.message for record in self._records]

    def log(self, message: str) -> None:
        if not message:
            return

        self._records.append(LogRecord(at=datetime.now(), message=message))

        if self._on_emit:
            self._on_emit(message)

    def save(self) -> Path:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        path = self.log_dir / self._started_at.strftime("nix-tts_%Y-%m-%d_%H-%M-%S.log")
        path.write_text(
            "\n".join(record.format() for record in self._records),
            encoding="utf-8",
        )
        return path

from __future__ import annotations

from dataclasses import dataclass
from queue import Empty, Queue
from threading import Event, Lock, Thread

import numpy as np
import sounddevice as sd

from nix_tts.utils.logger import Logger

DEFAULT_SAMPLE_RATE = 22_050

_STREAM_ERRORS = (sd.PortAudioError, OSError, RuntimeError, ValueError)


@dataclass(frozen=True)
class _PlaybackRequest:
    audio: np.ndarray
    sample_rate: int
    chunk_size: int


class Speaker:
    """Mono float32 output on the default device.

    ``play`` queues audio for a background worker and returns at once; use
    ``wait`` to block until everything queued has been written.
    """

    def __init__(
        self,
        *,
        chunk_size: int = 1024,
        prime_silence_ms: int = 200,
        logger: Logger | None = None,
    ):
        self.chunk_size = chunk_size
        self.prime_silence_ms = prime_silence_ms
        self._logger = logger

        self._queue: Queue[_PlaybackRequest | None] = Queue()
        self._stream_lock = Lock()
        self._stream: sd.OutputStream | None = None
        self._stream_device: int | None = None
        self._stream_rate: int | None = None

        self._worker_thread: Thread | None = None
        self._shutdown_event = Event()
        self._interrupt_event = Event()

    def play(self, samples: np.ndarray, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}.")

        audio = np.asarray(samples, dtype=np.float32).reshape(-1, 1)

        self._ensure_worker_started()
        self._queue.put(
            _PlaybackRequest(
                audio=audio,
                sample_rate=sample_rate,
                chunk_size=self.chunk_size,
            )
        )

    def wait(self) -> None:
        """Block until queued audio has been written to the device."""
        if self._worker_thread is None:
            return
        self._queue.join()

    def interrupt(self) -> None:
        """Stop the current playback (best-effort)."""
        self._interrupt_event.set()

    def close(self) -> None:
        """Stop the background thread and close the audio stream.

        Requests still queued are dropped. A later ``play`` starts a new worker.
        """
        self._shutdown_event.set()
        self._interrupt_event.set()

        if self._worker_thread is not None:
            # Unblock the worker if it is waiting for a request.
            self._queue.put(None)
            self._worker_thread.join(timeout=1.0)
            self._worker_thread = None

        self._drain_queue()

        with self._stream_lock:
            self._close_stream_unsafe()

        self._shutdown_event.clear()
        self._interrupt_event.clear()

    def _drain_queue(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                return
            self._queue.task_done()

    def _ensure_worker_started(self) -> None:
        if self._worker_thread is not None:
            return

        self._worker_thread = Thread(target=self._worker_loop, daemon=True)
        self._worker_thread.start()

    def _default_output_device(self) -> int | None:
        device = sd.default.device
        if isinstance(device, (list, tuple)) and len(device) >= 2:
            out_dev = device[1]
            return out_dev if isinstance(out_dev, int) and out_dev >= 0 else None
        return None

    def _ensure_stream_ready(self, sample_rate: int) -> None:
        """Open the OutputStream; reopen it if the device or sample rate changed."""

        desired_device = self._default_output_device()

        with self._stream_lock:
            if (
                self._stream is not None
                and self._stream_device == desired_device
                and self._stream_rate == sample_rate
            ):
                return

            self._close_stream_unsafe()

            self._log(f"[Speaker] Opening output stream: device={desired_device}, sample_rate={sample_rate}")
            self._stream = sd.OutputStream(
                samplerate=sample_rate,
                channels=1,
                dtype="float32",
                device=desired_device,
            )
            self._stream.start()
            self._stream_device = desired_device
            self._stream_rate = sample_rate

            # Prime the device with a short silence to avoid startup clicks.
            prime_frames = int(sample_rate * (self.prime_silence_ms / 1000.0))
            if prime_frames > 0:
                silence = np.zeros((prime_frames, 1), dtype=np.float32)
                try:
                    self._stream.write(silence)
                except _STREAM_ERRORS as e:
                    self._log(f"[Speaker] Priming the stream failed: {e}")

    def _close_stream_unsafe(self) -> None:
        # Assumes _stream_lock is held.
        if self._stream is None:
            return
        try:
            self._stream.close()
        finally:
            self._stream = None
            self._stream_device = None
            self._stream_rate = None

    def _write_audio(self, request: _PlaybackRequest) -> None:
        audio = request.audio
        for i in range(0, len(audio), request.chunk_size):
            if self._shutdown_event.is_set() or self._interrupt_event.is_set():
                self._log("[Speaker] Playback interrupted.")
                break

            chunk = audio[i : i + request.chunk_size]
            try:
                self._ensure_stream_ready(request.sample_rate)
                with self._stream_lock:
                    if self._stream is None:
                        break
                    self._stream.write(chunk)
            except _STREAM_ERRORS:
                # The stream may have become invalid (device change); reopen once
                # and retry this chunk.
                try:
                    self._ensure_stream_ready(request.sample_rate)
                    with self._stream_lock:
                        assert self._stream is not None
                        self._stream.write(chunk)
                except _STREAM_ERRORS as e:
                    self._log(f"[Speaker] Playback aborted: {e}")
                    break

    def _worker_loop(self) -> None:
        while not self._shutdown_event.is_set():
            request = self._queue.get()
            try:
                if request is None or self._shutdown_event.is_set():
                    break
                if request.audio.size == 0:
                    continue

                self._interrupt_event.clear()
                self._write_audio(request)
            finally:
                self._queue.task_done()

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)

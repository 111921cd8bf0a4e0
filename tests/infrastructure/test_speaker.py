"""Unit tests for Speaker (sounddevice is mocked)."""
from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

import numpy as np

try:
    from nix_tts.infrastructure.audio import speaker as speaker_module
except OSError:
    # sounddevice raises OSError when the PortAudio library is missing.
    speaker_module = None


@unittest.skipIf(speaker_module is None, "PortAudio is not available")
class TestSpeaker(unittest.TestCase):
    """Test cases for Speaker."""

    def setUp(self):
        """Set up test fixtures."""
        patcher = patch.object(speaker_module, "sd")
        self.mock_sd = patcher.start()
        self.addCleanup(patcher.stop)

        self.mock_sd.default.device = (0, 1)
        self.streams: list[MagicMock] = []
        self.mock_sd.OutputStream.side_effect = self._new_stream

        self.speaker = speaker_module.Speaker(chunk_size=1024, prime_silence_ms=0)
        self.addCleanup(self.speaker.close)

    def _new_stream(self, **kwargs):
        stream = MagicMock()
        self.streams.append(stream)
        return stream

    def test_play_opens_mono_float32_stream_and_writes_chunks(self):
        self.speaker.play(np.ones(3000, dtype=np.float32), 22_050)
        self.speaker.wait()

        self.mock_sd.OutputStream.assert_called_once_with(
            samplerate=22_050,
            channels=1,
            dtype="float32",
            device=1,
        )
        stream = self.streams[0]
        stream.start.assert_called_once()

        written = [call.args[0] for call in stream.write.call_args_list]
        self.assertEqual([chunk.shape for chunk in written], [(1024, 1), (1024, 1), (952, 1)])
        self.assertTrue(all(chunk.dtype == np.float32 for chunk in written))

    def test_stream_is_reused_for_same_sample_rate(self):
        self.speaker.play(np.ones(10), 22_050)
        self.speaker.play(np.ones(10), 22_050)
        self.speaker.wait()

        self.assertEqual(self.mock_sd.OutputStream.call_count, 1)

    def test_stream_is_reopened_when_sample_rate_changes(self):
        self.speaker.play(np.ones(10), 22_050)
        self.speaker.wait()
        self.speaker.play(np.ones(10), 16_000)
        self.speaker.wait()

        self.assertEqual(self.mock_sd.OutputStream.call_count, 2)
        self.streams[0].close.assert_called_once()
        self.assertEqual(self.mock_sd.OutputStream.call_args.kwargs["samplerate"], 16_000)

    def test_empty_audio_is_ignored(self):
        self.speaker.play(np.zeros(0, dtype=np.float32), 22_050)
        self.speaker.wait()

        self.mock_sd.OutputStream.assert_not_called()

    def test_primes_stream_with_silence(self):
        speaker = speaker_module.Speaker(prime_silence_ms=100)
        self.addCleanup(speaker.close)

        speaker.play(np.ones(10), 22_050)
        speaker.wait()

        first_write = self.streams[0].write.call_args_list[0].args[0]
        self.assertEqual(first_write.shape, (2205, 1))
        self.assertFalse(first_write.any())

    def test_invalid_sample_rate_raises(self):
        with self.assertRaises(ValueError):
            self.speaker.play(np.ones(10), 0)

    def test_close_closes_stream(self):
        self.speaker.play(np.ones(10), 22_050)
        self.speaker.wait()

        self.speaker.close()

        self.streams[0].close.assert_called_once()

    def test_interrupt_stops_current_clip_and_next_play_is_unaffected(self):
        stream = MagicMock()

        def write(chunk):
            if stream.write.call_count == 1:
                self.speaker.interrupt()

        stream.write.side_effect = write
        self.mock_sd.OutputStream.side_effect = None
        self.mock_sd.OutputStream.return_value = stream

        self.speaker.play(np.ones(3000, dtype=np.float32), 22_050)
        self.speaker.wait()

        self.assertEqual(stream.write.call_count, 1)

        self.speaker.play(np.ones(3000, dtype=np.float32), 22_050)
        self.speaker.wait()

        self.assertEqual(stream.write.call_count, 4)

    def test_play_after_close_starts_new_worker(self):
        self.speaker.play(np.ones(10), 22_050)
        self.speaker.wait()
        self.speaker.close()

        self.speaker.play(np.ones(10), 22_050)
        self.speaker.wait()

        self.assertEqual(len(self.streams), 2)
        self.streams[1].write.assert_called_once()


if __name__ == "__main__":
    unittest.main()

import wave

import numpy as np
import pygame
import pytest

import audio
from audio import BlipPlayer, TouchRecorder, blip_pcm_bytes, generate_blip, mix_blips, write_wav
from touch import TouchEvent


class TestBlip:
    def test_shape_and_format(self):
        blip = generate_blip(sample_rate=48000, seconds=0.06, frequency=880.0)
        assert blip.shape == (2880, 2)
        assert blip.dtype == np.int16
        assert np.array_equal(blip[:, 0], blip[:, 1])

    def test_amplitude_and_decay(self):
        blip = generate_blip(sample_rate=48000, seconds=0.06, frequency=880.0, amplitude=0.25, decay=6.0)
        peak = np.abs(blip[:, 0]).max()
        assert 0 < peak <= int(0.25 * 32767)
        quarter = blip.shape[0] // 4
        head = np.abs(blip[:quarter, 0]).max()
        tail = np.abs(blip[-quarter:, 0]).max()
        assert tail < head / 2

    def test_pcm_bytes_are_interleaved_16bit(self):
        blip = generate_blip(sample_rate=8000, seconds=0.01, channels=2)
        raw = blip_pcm_bytes(blip)
        assert len(raw) == blip.shape[0] * 2 * 2
        assert np.array_equal(np.frombuffer(raw, dtype="<i2").reshape(-1, 2), blip)


class TestMixing:
    def test_blips_land_at_their_times(self):
        blip = np.full((10, 2), 1000, dtype=np.int16)
        track = mix_blips([0.5], blip, sample_rate=100, duration=1.0)
        assert track.shape == (100, 2)
        assert (track[50:60] == 1000).all()
        assert (track[:50] == 0).all()
        assert (track[60:] == 0).all()

    def test_overlaps_sum_and_clip(self):
        blip = np.full((10, 2), 30000, dtype=np.int16)
        track = mix_blips([0.0, 0.0, 0.05], blip, sample_rate=100, duration=1.0)
        assert track.dtype == np.int16
        assert track[0, 0] == 32767
        assert track[12, 0] == 30000

    def test_times_past_the_end_are_dropped(self):
        blip = np.full((10, 2), 1000, dtype=np.int16)
        track = mix_blips([5.0], blip, sample_rate=100, duration=1.0, tail=0.25)
        assert track.shape == (125, 2)
        assert not track.any()

    def test_write_wav(self, tmp_path):
        samples = generate_blip(sample_rate=8000, seconds=0.02)
        path = str(tmp_path / "blip.wav")
        write_wav(path, samples, 8000)
        with wave.open(path, "rb") as wf:
            assert wf.getnchannels() == 2
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 8000
            assert wf.getnframes() == samples.shape[0]


@pytest.fixture
def no_audio_device(monkeypatch):
    def fail(*args, **kwargs):
        raise pygame.error("no audio device")

    monkeypatch.setattr(audio.pygame.mixer, "get_init", lambda: None)
    monkeypatch.setattr(audio.pygame.mixer, "init", fail)


class TestSinks:
    def test_recorder_keeps_events(self):
        recorder = TouchRecorder()
        recorder(TouchEvent(0, 1, 0.25))
        recorder(TouchEvent(1, 3, 0.5))
        assert recorder.times == [0.25, 0.5]
        recorder.clear()
        assert recorder.events == []

    def test_player_without_audio_device_is_silent(self, no_audio_device, capsys):
        player = BlipPlayer()
        assert not player.available
        player(TouchEvent(0, 1, 0.0))
        assert player.played == 0
        assert "muted" in capsys.readouterr().out

    def test_muted_player_does_not_play(self, no_audio_device):
        class FakeSound:
            def __init__(self):
                self.plays = 0

            def play(self):
                self.plays += 1

        player = BlipPlayer()
        player.sound = FakeSound()
        player(TouchEvent(0, 1, 0.0))
        assert player.toggle_mute() is True
        player(TouchEvent(0, 1, 0.1))
        assert player.sound.plays == 1
        assert player.played == 1

import math
import wave

import numpy as np
import pygame

import config


def generate_blip(sample_rate=None, seconds=None, frequency=None, amplitude=None, decay=None, channels=2):
    """
    Short decaying sine blip as 16-bit samples, shape (n, channels).

    Every channel carries the same signal.
    """
    sample_rate = sample_rate if sample_rate is not None else config.SAMPLE_RATE
    seconds = seconds if seconds is not None else config.BLIP_SECONDS
    frequency = frequency if frequency is not None else config.BLIP_FREQUENCY
    amplitude = amplitude if amplitude is not None else config.BLIP_AMPLITUDE
    decay = decay if decay is not None else config.BLIP_DECAY

    n = int(round(sample_rate * seconds))
    i = np.arange(n, dtype=np.float64)
    phase = 2.0 * math.pi * i * frequency / sample_rate
    envelope = np.exp(-decay * i / max(n, 1))
    mono = (np.sin(phase) * amplitude * envelope * 32767).astype(np.int16)
    return np.repeat(mono[:, None], channels, axis=1)


def blip_pcm_bytes(samples):
    """Interleaved little-endian 16-bit PCM bytes for a (n, channels) sample array."""
    return np.ascontiguousarray(samples, dtype="<i2").tobytes()


class BlipPlayer:
    """
    Touch sink that plays a blip through pygame.mixer.

    A new channel is taken for every touch so blips can overlap. If the audio
    device cannot be opened the player stays silent.
    """
    def __init__(self, volume=None, muted=False):
        self.sound = None
        self.muted = muted
        self.played = 0
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=config.SAMPLE_RATE, size=-16,
                                  channels=config.AUDIO_CHANNELS, buffer=config.AUDIO_BUFFER)
            # The device may not honour the requested format; build the blip for what we got
            frequency, _size, channels = pygame.mixer.get_init()
            samples = generate_blip(sample_rate=frequency, channels=channels)
            if channels == 1:
                samples = samples[:, 0].copy()
            self.sound = pygame.sndarray.make_sound(samples)
            self.sound.set_volume(volume if volume is not None else config.BLIP_VOLUME)
        except pygame.error as e:
            print(f"Warning: audio unavailable, running muted ({e})")
            self.sound = None

    @property
    def available(self):
        return self.sound is not None

    def toggle_mute(self):
        self.muted = not self.muted
        return self.muted

    def __call__(self, event):
        if self.sound is None or self.muted:
            return
        self.sound.play()
        self.played += 1


class TouchRecorder:
    """Touch sink that keeps every touch, e.g. to lay blips under a recorded video."""
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def times(self):
        return [float(e.time) for e in self.events]

    def clear(self):
        self.events.clear()


def mix_blips(times, blip, sample_rate, duration, tail=0.0):
    """
    Mix one blip at each time into a single track.

    Summation happens in int32 and the result is clipped back to int16.
    times are in seconds from the start of the track.
    """
    channels = blip.shape[1]
    total_samples = int(math.ceil((max(0.0, duration) + tail) * sample_rate))
    total_samples = max(total_samples, blip.shape[0])

    mix_acc = np.zeros((total_samples, channels), dtype=np.int32)
    blip32 = blip.astype(np.int32)
    blen = blip32.shape[0]
    for t in times:
        start = int(t * sample_rate)
        if start < 0 or start >= total_samples:
            continue
        end = min(total_samples, start + blen)
        mix_acc[start:end, :] += blip32[:end - start, :]

    return np.clip(mix_acc, -32768, 32767).astype(np.int16)


def write_wav(path, samples, sample_rate):
    """Write (n, channels) int16 samples as a PCM WAV file."""
    with wave.open(path, "wb") as wf:
        wf.setnchannels(samples.shape[1])
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(blip_pcm_bytes(samples))

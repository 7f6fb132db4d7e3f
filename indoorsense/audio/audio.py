"""
Tone playback for IndoorSense.

Each feature type has its own short tone. A `<type>.wav` file in the tone
directory is used when present, otherwise a sine tone is synthesized.

HEADLESS MODE SUPPORT:
For Raspberry Pi or other headless systems without a working pyglet audio
driver, this module falls back to pygame for playback. When neither backend
is available, tones are skipped with a warning.
"""

import logging
import os

import numpy as np

from indoorsense.config import AudioConfig

logger = logging.getLogger(__name__)

# Try to import pyglet first, fall back to pygame if it fails
AUDIO_BACKEND = None

try:
    import pyglet.media
    import pyglet.media.synthesis
    AUDIO_BACKEND = 'pyglet'
    logger.info("Audio backend: pyglet")
except Exception as e:
    logger.warning(f"Failed to initialize pyglet: {e}")
    logger.info("Attempting to use pygame as audio backend...")

    try:
        import pygame
        AUDIO_BACKEND = 'pygame'
        logger.info("Audio backend: pygame (headless compatible)")
    except Exception as e2:
        logger.error(f"Failed to initialize pygame: {e2}")
        logger.warning("No audio backend available! Tones will not play.")


def synthesize_tone(frequency, duration, sample_rate, volume=1.0, fade=0.01):
    """
    Build a 16-bit sine tone with a short linear fade in and out.

    Args:
        frequency (float): Tone frequency in Hz
        duration (float): Length in seconds
        sample_rate (int): Samples per second
        volume (float): Peak amplitude between 0.0 and 1.0
        fade (float): Fade length in seconds at each end

    Returns:
        numpy.ndarray: int16 mono samples
    """
    n_samples = max(int(duration * sample_rate), 1)
    t = np.arange(n_samples) / float(sample_rate)
    wave = np.sin(2 * np.pi * frequency * t)

    n_fade = min(int(fade * sample_rate), n_samples // 2)
    if n_fade > 0:
        ramp = np.linspace(0.0, 1.0, n_fade)
        wave[:n_fade] *= ramp
        wave[-n_fade:] *= ramp[::-1]

    return (wave * volume * 32767).astype(np.int16)


class TonePlayer:
    """
    Plays the tone channel of a feature type.

    Sources are created lazily on first use and cached per channel.
    Supports both pyglet and pygame backends.
    """

    def __init__(self, backend=AUDIO_BACKEND, tone_directory=AudioConfig.TONE_DIRECTORY,
                 duration=AudioConfig.TONE_DURATION, volume=AudioConfig.TONE_VOLUME):
        """
        Initialize the tone player.

        Args:
            backend (str): 'pyglet', 'pygame' or None to disable playback
            tone_directory (str): Directory searched for <type>.wav files
            duration (float): Length of synthesized tones in seconds
            volume (float): Playback volume between 0.0 and 1.0
        """
        self.backend = backend
        self.tone_directory = tone_directory
        self.duration = duration
        self.volume = volume
        self.sounds = {}
        self.player = None

        if self.backend == 'pygame':
            pygame.mixer.init(frequency=AudioConfig.SAMPLE_RATE, size=-16, channels=2, buffer=512)
        elif self.backend is None:
            logger.warning("No audio backend - tone player disabled")

        logger.info(f"Initialized tone player ({self.backend})")

    def frequency_for(self, channel):
        """Sine frequency of a tone channel in Hz."""
        return AudioConfig.TONE_FREQUENCIES[channel.value]

    def tone_file_for(self, channel):
        """Path of the wav override for a channel, or None if there is none."""
        path = os.path.join(self.tone_directory, f"{channel.value}.wav")
        return path if os.path.exists(path) else None

    def _load(self, channel):
        path = self.tone_file_for(channel)

        if self.backend == 'pyglet':
            if path:
                return pyglet.media.load(path, streaming=False)
            sine = pyglet.media.synthesis.Sine(
                self.duration,
                frequency=self.frequency_for(channel),
                sample_rate=AudioConfig.SAMPLE_RATE,
            )
            return pyglet.media.StaticSource(sine)

        if self.backend == 'pygame':
            if path:
                sound = pygame.mixer.Sound(path)
            else:
                samples = synthesize_tone(self.frequency_for(channel), self.duration,
                                          AudioConfig.SAMPLE_RATE)
                channels = pygame.mixer.get_init()[2]
                if channels > 1:
                    samples = np.column_stack([samples] * channels)
                sound = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
            sound.set_volume(self.volume)
            return sound

        return None

    def play(self, channel):
        """
        Play the tone for a channel, restarting it if it is already playing.

        Args:
            channel (ToneChannel): Channel to play

        Returns:
            bool: True if playback started
        """
        if self.backend is None:
            return False

        if channel not in self.sounds:
            self.sounds[channel] = self._load(channel)

        sound = self.sounds[channel]
        try:
            if self.backend == 'pyglet':
                if self.player is not None:
                    self.player.pause()
                    self.player.delete()
                self.player = sound.play()
                self.player.volume = self.volume
            else:
                sound.stop()
                sound.play()
        except Exception as e:
            logger.error(f"Cannot play tone {channel.value}: {e}")
            return False

        logger.debug(f"Playing tone {channel.value}")
        return True

    def stop_all(self):
        """Stop any tone that is currently playing."""
        if self.backend == 'pyglet' and self.player is not None:
            try:
                self.player.pause()
                self.player.delete()
            except Exception as e:
                logger.debug(f"Error stopping tone player: {e}")
            self.player = None
        elif self.backend == 'pygame':
            for sound in self.sounds.values():
                sound.stop()

"""
Spoken output and accessibility announcements.

Both services take the platform call as an injected callable. Without one,
output goes to the log, which is what the replay CLI and the tests use.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class LoggingSpeechBackend:
    """Speech backend that writes utterances to the log instead of a speaker."""

    def say(self, text):
        logger.info(f"Speaking: {text}")

    def stop(self):
        logger.debug("Speech stopped")


class SpeechAnnouncer:
    """
    Speaks short phrases, interrupting any phrase still in progress.

    When a screen reader is running its own announcements already cover the
    text, so speech is skipped unless `always_speak` is set.
    """

    def __init__(self, backend=None, always_speak=False, screen_reader_running=None):
        """
        Initialize the speech announcer.

        Args:
            backend: Object with say(text) and stop() methods
            always_speak (bool): Speak even when a screen reader is running
            screen_reader_running (callable): Returns True while a screen reader is active
        """
        self.backend = backend if backend is not None else LoggingSpeechBackend()
        self.always_speak = always_speak
        self.screen_reader_running = screen_reader_running or (lambda: False)
        self.last_utterance = None
        self._lock = threading.Lock()

    def say(self, text):
        """
        Speak a phrase after stopping the current one.

        Args:
            text (str): Phrase to speak. Empty text is ignored.

        Returns:
            bool: True if the phrase was handed to the backend
        """
        if not text:
            return False
        if self.screen_reader_running() and not self.always_speak:
            logger.debug(f"Screen reader active, not speaking: {text}")
            return False

        with self._lock:
            self.backend.stop()
            self.backend.say(text)
            self.last_utterance = text
        return True

    def stop(self):
        """Stop the phrase in progress, if any."""
        with self._lock:
            self.backend.stop()


class AccessibilityAnnouncer:
    """
    Posts announcements to the platform accessibility API.
    """

    def __init__(self, post=None):
        """
        Args:
            post (callable): Receives the announcement string. Defaults to logging it.
        """
        self.post = post or (lambda text: logger.info(f"Announcement: {text}"))

    def announce(self, text):
        """Post an announcement. Empty strings are ignored."""
        if not text:
            return False
        self.post(text)
        return True

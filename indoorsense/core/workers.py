"""
Background workers and timers for feedback output.

Core state (feature store, session, dispatcher) lives on one thread. Platform
output is handed to a FeedbackWorker through a queue so that speech, tones
and haptics never block touch handling. Delayed haptic steps are scheduled
through a PatternScheduler whose timers are cancellable and keyed by pattern.
"""

import logging
import queue
import threading
from typing import Callable, Dict, Optional

from indoorsense.config import WorkerConfig
from indoorsense.core.feedback import FeedbackRequest

logger = logging.getLogger(__name__)


# ==================== Pattern Scheduler ====================

class PatternScheduler:
    """
    Cancellable delayed callbacks keyed by a pattern identifier.

    Scheduling a key that already has a pending timer cancels that timer
    first, so timers for the same pattern never stack.
    """

    def __init__(self, timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self._timer_factory = timer_factory
        self._timers: Dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        """
        Run `callback` after `delay` seconds unless `key` is cancelled or rescheduled first.
        """
        def fire():
            with self._lock:
                # A superseded timer may still fire if cancel raced with it
                if self._timers.get(key) is not timer:
                    return
                del self._timers[key]
            try:
                callback()
            except Exception as e:
                logger.error(f"Error running scheduled pattern step {key}: {e}", exc_info=True)

        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
            timer = self._timer_factory(delay, fire)
            timer.daemon = True
            self._timers[key] = timer
        timer.start()

    def cancel(self, key: str) -> bool:
        """
        Cancel the pending timer for `key`.

        Returns:
            bool: True if a timer was pending
        """
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_prefix(self, prefix: str) -> int:
        """
        Cancel every pending timer whose key starts with `prefix`.
        """
        with self._lock:
            keys = [k for k in self._timers if k.startswith(prefix)]
            timers = [self._timers.pop(k) for k in keys]
        for timer in timers:
            timer.cancel()
        return len(timers)

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def pending(self) -> int:
        with self._lock:
            return len(self._timers)


# ==================== Feedback Worker ====================

class FeedbackCommand:
    """Represents a feedback command to be executed."""

    def __init__(self, command_type, **kwargs):
        """
        Initialize a feedback command.

        Args:
            command_type (str): Type of command ('feedback' or 'stop_all')
            **kwargs: Command-specific parameters
        """
        self.command_type = command_type
        self.params = kwargs


class FeedbackWorker(threading.Thread):
    """
    Background thread for handling all feedback output.

    This worker processes feedback commands from a queue, preventing audio
    and haptic operations from blocking touch handling.
    """

    def __init__(self, announcer, speech, tones, haptics,
                 stop_event=None, queue_maxsize=WorkerConfig.FEEDBACK_QUEUE_MAXSIZE):
        """
        Initialize the feedback worker.

        Args:
            announcer (AccessibilityAnnouncer): Accessibility announcement service
            speech (SpeechAnnouncer): Speech service
            tones (TonePlayer): Tone service
            haptics (HapticEngine): Haptic service
            stop_event (threading.Event): Event to signal shutdown
            queue_maxsize (int): Maximum size of command queue
        """
        super().__init__(daemon=True, name="FeedbackWorker")

        self.announcer = announcer
        self.speech = speech
        self.tones = tones
        self.haptics = haptics
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.command_queue = queue.Queue(maxsize=queue_maxsize)

        logger.info("FeedbackWorker initialized")

    def enqueue_command(self, command):
        """
        Add a feedback command to the queue (non-blocking).

        Args:
            command (FeedbackCommand): Command to execute

        Returns:
            bool: True if command was enqueued, False if queue was full
        """
        try:
            self.command_queue.put_nowait(command)
            return True
        except queue.Full:
            logger.warning(f"Feedback queue full, dropping command: {command.command_type}")
            return False

    def submit(self, request: Optional[FeedbackRequest]) -> bool:
        """
        Queue a FeedbackRequest from the dispatcher. None is ignored.
        """
        if request is None:
            return False
        return self.enqueue_command(FeedbackCommand('feedback', request=request))

    def run(self):
        """Main worker loop - processes feedback commands from queue."""
        logger.info("FeedbackWorker started")

        while not self.stop_event.is_set():
            try:
                # Wait for command with timeout to allow checking stop_event
                command = self.command_queue.get(timeout=WorkerConfig.QUEUE_TIMEOUT)
            except queue.Empty:
                continue

            self.execute_command(command)
            self.command_queue.task_done()

        logger.info("FeedbackWorker stopped")

    def execute_command(self, command):
        """
        Execute a single feedback command.

        Errors are logged and do not stop the worker.

        Args:
            command (FeedbackCommand): Command to execute
        """
        try:
            cmd_type = command.command_type
            params = command.params

            if cmd_type == 'feedback':
                self._deliver(params['request'])

            elif cmd_type == 'stop_all':
                self.haptics.stop_all_patterns()
                self.speech.stop()

            else:
                logger.warning(f"Unknown feedback command type: {cmd_type}")

        except Exception as e:
            logger.error(f"Error executing command {command.command_type}: {e}", exc_info=True)

    def _deliver(self, request: FeedbackRequest):
        """
        Route one FeedbackRequest to the platform services.
        """
        if request.stop_patterns:
            self.haptics.stop_all_patterns()
        if request.announcement:
            self.announcer.announce(request.announcement)
        if request.speech:
            self.speech.say(request.speech)
        if request.tone is not None:
            self.tones.play(request.tone)
        if request.haptic is not None:
            self.haptics.play(request.haptic)

    def clear_queue(self):
        """Drop every pending command."""
        dropped = 0
        while True:
            try:
                self.command_queue.get_nowait()
                self.command_queue.task_done()
                dropped += 1
            except queue.Empty:
                break
        if dropped:
            logger.debug(f"Dropped {dropped} pending feedback commands")

    def stop(self):
        """Signal the worker to stop."""
        logger.info("Stopping FeedbackWorker...")
        self.stop_event.set()

"""
IndoorSense - Accessible floor-plan exploration.

This is the main entry point. It loads a floor plan, starts a research
session, replays a script of touches through the touch interaction policy
with speech, tone and haptic feedback, and exports the collected data.
"""

import logging
import signal
import sys
import threading

from indoorsense.args_parser import get_args
from indoorsense.audio import AccessibilityAnnouncer, HapticEngine, SpeechAnnouncer, TonePlayer
from indoorsense.config import GestureConfig, WorkerConfig
from indoorsense.core.exporter import ExportError, ResearchExporter
from indoorsense.core.feedback import FeedbackDispatcher
from indoorsense.core.interaction_policy import TouchInteractionPolicy
from indoorsense.core.map_store import FeatureStore
from indoorsense.core.research_logger import InteractionSession
from indoorsense.core.utils import FloorPlanLoadError, load_floor_plan, load_touch_script
from indoorsense.core.workers import FeedbackCommand, FeedbackWorker
from indoorsense.detection.gesture_detection import TapSequenceDetector

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def initialize_system(args):
    """
    Initialize all system components.

    Args:
        args (argparse.Namespace): Parsed command line arguments

    Returns:
        dict: Dictionary containing all initialized components
    """
    logger.info("Initializing IndoorSense...")

    features = load_floor_plan(args.floor_plan)
    store = FeatureStore(features)
    session = InteractionSession(total_features=len(store))

    dispatcher = FeedbackDispatcher(
        store,
        speak_enabled=not args.no_speech,
        tones_enabled=args.tones,
        haptics_enabled=not args.no_haptics,
    )

    components = {
        'store': store,
        'session': session,
        'dispatcher': dispatcher,
        'announcer': AccessibilityAnnouncer(),
        'speech': SpeechAnnouncer(),
        'tones': TonePlayer() if args.tones else TonePlayer(backend=None),
        'haptics': HapticEngine(),
    }

    logger.info(f"Loaded {len(store)} features from {args.floor_plan}")
    return components


def create_feedback_worker(components, stop_event):
    """
    Create and start the feedback worker thread.

    Returns:
        FeedbackWorker: The running worker
    """
    worker = FeedbackWorker(
        components['announcer'],
        components['speech'],
        components['tones'],
        components['haptics'],
        stop_event=stop_event,
    )
    worker.start()
    return worker


def setup_signal_handler(stop_event):
    """
    Setup signal handler for graceful shutdown.

    Args:
        stop_event (threading.Event): Event to signal on interrupt
    """
    def signal_handler(sig, frame):
        logger.info("Signal received, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, signal_handler)


def resolve_gesture(policy, detector, now=None):
    """
    Hand a settled tap sequence to the policy. Without `now` any pending
    sequence is resolved.

    Returns:
        GestureType or None: The gesture that was handled
    """
    gesture = detector.flush() if now is None else detector.poll(now)
    if gesture is not None:
        policy.handle_gesture(gesture, detector.last_sequence_duration)
    return gesture


def replay_touches(policy, touches, viewport, stop_event, detector=None):
    """
    Feed scripted touches through the interaction policy.

    Rows without a time are placed GestureConfig.REPLAY_STEP after the
    previous row. Taps go through a TapSequenceDetector on the replay clock,
    and a sequence is handed to the policy once it has settled on that clock.
    A sequence still pending after the last row is resolved at the end.

    Args:
        policy (TouchInteractionPolicy): Touch handler
        touches (list): TouchEvent objects in replay order
        viewport (Size): Size of the touch surface
        stop_event (threading.Event): Stops the replay early when set
        detector (TapSequenceDetector): Gesture-area tap counter
    """
    if detector is None:
        detector = TapSequenceDetector()
    now = 0.0

    for touch in touches:
        if stop_event.is_set():
            logger.info("Replay interrupted")
            return

        now = touch.time if touch.time is not None else now + GestureConfig.REPLAY_STEP
        resolve_gesture(policy, detector, now)

        if touch.event == 'tap':
            policy.gesture_area_tap()
            detector.push_tap(now)
        elif touch.event == 'overview':
            policy.handle_overview()
        elif touch.event == 'release':
            policy.handle_release(touch.point, viewport, touch.duration)
        else:
            policy.handle_touch(touch.point, viewport, is_drag=touch.event == 'drag',
                                duration=touch.duration)

    resolve_gesture(policy, detector)


def export_data(session, out_dir):
    """
    Write the combined export and the three CSV files.

    Returns:
        bool: True if every file was written
    """
    exporter = ResearchExporter(session)
    try:
        path = exporter.quick_export(out_dir)
        logger.info(f"Quick export written to {path}")
    except ExportError as e:
        logger.error(f"Quick export failed: {e}")
        return False

    written = exporter.export_all(out_dir)
    return len(written) == 3


def cleanup(components, worker):
    """
    Drain pending feedback and stop the worker thread.
    """
    logger.info("Cleaning up resources...")

    if worker.is_alive() and not worker.stop_event.is_set():
        worker.enqueue_command(FeedbackCommand('stop_all'))
        worker.command_queue.join()
    else:
        worker.clear_queue()
    worker.stop()
    worker.join(timeout=WorkerConfig.THREAD_SHUTDOWN_TIMEOUT)

    components['haptics'].shutdown()
    components['tones'].stop_all()

    logger.info("Cleanup complete")


def main(argv=None):
    args = get_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        components = initialize_system(args)
        touches = load_touch_script(args.touches) if args.touches else []
    except (FloorPlanLoadError, OSError, ValueError) as e:
        logger.error(f"Startup failed: {e}")
        return 1

    stop_event = threading.Event()
    setup_signal_handler(stop_event)
    worker = create_feedback_worker(components, stop_event)

    session = components['session']
    policy = TouchInteractionPolicy(
        components['store'], session, components['dispatcher'], sink=worker.submit
    )

    ok = False
    try:
        session.start_session(args.participant, args.condition)
        policy.initial_announcement()
        replay_touches(policy, touches, args.viewport, stop_event)
        session.end_session()
        logger.info("Session summary:\n" + session.session_summary())
        ok = export_data(session, args.out)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")
        stop_event.set()
    finally:
        cleanup(components, worker)

    return 0 if ok else 1


# ==================== Main Entry Point ====================

if __name__ == "__main__":
    sys.exit(main())

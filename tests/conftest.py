from typing import List, Tuple

import pytest

from indoorsense.core.map_store import FeatureStore
from indoorsense.core.research_logger import InteractionSession
from indoorsense.models.feature import Feature, FeatureType
from indoorsense.utils.coords import Coords, Size
from indoorsense.utils.geometry import to_screen


def make_feature(feature_id, feature_type, name, coordinates):
    return Feature(
        id=feature_id,
        type=feature_type,
        name=name,
        coordinates=tuple(tuple(float(v) for v in p) for p in coordinates),
    )


class FakeClock:
    """Manually advanced clock, usable wherever a time.time-like callable is expected."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimer:
    """Stand-in for threading.Timer that only fires when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class TimerFactory:
    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    def live(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]


class RecordingAnnouncer:
    def __init__(self):
        self.announcements: List[str] = []

    def announce(self, text):
        self.announcements.append(text)


class RecordingSpeech:
    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def say(self, text):
        self.events.append(("say", text))

    def stop(self):
        self.events.append(("stop", ""))


class RecordingTones:
    def __init__(self):
        self.played = []

    def play(self, channel):
        self.played.append(channel)


class RecordingHaptics:
    def __init__(self):
        self.events = []

    def play(self, pattern):
        self.events.append(("play", pattern))

    def stop_all_patterns(self):
        self.events.append(("stop", None))


@pytest.fixture
def unit_square():
    return make_feature("sq", FeatureType.ROOM, "Square", [[0, 0], [10, 0], [10, 10], [0, 10]])


@pytest.fixture
def sample_features():
    return [
        make_feature("room_101", FeatureType.ROOM, "Room 101",
                     [[10, 10], [90, 10], [90, 80], [10, 80]]),
        make_feature("corridor_main", FeatureType.CORRIDOR, "Main Corridor",
                     [[10, 90], [250, 90], [250, 120], [10, 120]]),
        make_feature("elevator_a", FeatureType.ELEVATOR, "Elevator A",
                     [[110, 10], [150, 10], [150, 50], [110, 50]]),
        make_feature("stairs_east", FeatureType.STAIRS, "East Stairs",
                     [[190, 10], [250, 10], [250, 80], [190, 80]]),
        make_feature("restroom_1", FeatureType.BATHROOM, "Restroom",
                     [[110, 130], [170, 130], [170, 190], [110, 190]]),
        make_feature("info_desk", FeatureType.LANDMARK, "Information Desk",
                     [[20, 140], [70, 140], [70, 180], [20, 180]]),
    ]


@pytest.fixture
def store(sample_features):
    return FeatureStore(sample_features)


@pytest.fixture
def viewport():
    return Size(390.0, 700.0)


@pytest.fixture
def screen_point(store, viewport):
    """Screen position of a map-space point in the sample viewport."""
    scale, offset = store.scale_and_offset(viewport)

    def convert(x, y):
        return to_screen(Coords(x, y), scale, offset)

    return convert


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(store, clock):
    ids = iter(["SESSION-1", "SESSION-2", "SESSION-3"])
    return InteractionSession(total_features=len(store), clock=clock, id_factory=lambda: next(ids))


@pytest.fixture
def timer_factory():
    return TimerFactory()


@pytest.fixture
def announcer():
    return RecordingAnnouncer()


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def tones():
    return RecordingTones()


@pytest.fixture
def haptics():
    return RecordingHaptics()

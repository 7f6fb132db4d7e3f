"""
CSV export of research data.

Formatting functions are pure: they serialize exactly the records they are
given, in the given order. Writing files is a separate step that can fail
with ExportError without touching the in-memory session, so an export can
simply be retried.

Numeric fields use Python's shortest round-trip representation, optional
fields are empty when absent and booleans are written as true/false.
"""

import csv
import io
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from indoorsense.config import ExportConfig
from indoorsense.core.research_logger import InteractionSession
from indoorsense.models.research import (
    GestureRecord,
    InteractionRecord,
    InteractionType,
    SessionRecord,
)

logger = logging.getLogger(__name__)

INTERACTION_HEADERS = [
    'timestamp', 'session_id', 'participant_id', 'x_coordinate', 'y_coordinate',
    'feature_id', 'feature_name', 'feature_type', 'interaction_type', 'duration',
]

GESTURE_HEADERS = [
    'timestamp', 'session_id', 'participant_id', 'gesture_type', 'success', 'duration', 'attempts',
]

SESSION_HEADERS = [
    'session_id', 'participant_id', 'start_time', 'end_time', 'duration', 'total_interactions',
    'features_discovered', 'total_features', 'coverage_percentage', 'study_condition', 'error_count',
]


class ExportError(OSError):
    """Raised when an export file cannot be written."""


# ==================== Field formatting ====================

def _num(value: Union[int, float]) -> str:
    return repr(value)


def _opt(value: Optional[Union[str, int, float]]) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return _num(value)


def _bool(value: bool) -> str:
    return 'true' if value else 'false'


def _parse_opt_float(text: str) -> Optional[float]:
    return float(text) if text != '' else None


def _parse_opt_str(text: str) -> Optional[str]:
    return text if text != '' else None


def _rows_to_csv(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


# ==================== Row builders ====================

def interaction_row(record: InteractionRecord) -> List[str]:
    return [
        _num(record.timestamp),
        record.session_id,
        record.participant_id,
        _num(record.x),
        _num(record.y),
        _opt(record.feature_id),
        _opt(record.feature_name),
        _opt(record.feature_type),
        record.interaction_type.value,
        _opt(record.duration),
    ]


def gesture_row(record: GestureRecord) -> List[str]:
    return [
        _num(record.timestamp),
        record.session_id,
        record.participant_id,
        record.gesture_type.value,
        _bool(record.success),
        _num(record.duration),
        _num(record.attempts),
    ]


def session_row(record: SessionRecord, now: Callable[[], float] = time.time) -> List[str]:
    """
    A session still without an end time is exported as ending now.
    """
    end_time = record.end_time if record.end_time is not None else now()
    return [
        record.session_id,
        record.participant_id,
        _num(record.start_time),
        _num(end_time),
        _num(end_time - record.start_time),
        _num(record.total_interactions),
        _num(record.unique_features_discovered),
        _num(record.total_features_available),
        _num(record.exploration_coverage * 100),
        record.study_condition.value,
        _num(record.error_count),
    ]


# ==================== CSV documents ====================

def interactions_to_csv(records: Iterable[InteractionRecord]) -> str:
    return _rows_to_csv(INTERACTION_HEADERS, (interaction_row(r) for r in records))


def gestures_to_csv(records: Iterable[GestureRecord]) -> str:
    return _rows_to_csv(GESTURE_HEADERS, (gesture_row(r) for r in records))


def sessions_to_csv(records: Iterable[SessionRecord], now: Callable[[], float] = time.time) -> str:
    return _rows_to_csv(SESSION_HEADERS, (session_row(r, now) for r in records))


def parse_interactions_csv(text: str) -> List[InteractionRecord]:
    """
    Read back the output of `interactions_to_csv`.

    Raises:
        ValueError: If the header does not match or a field cannot be parsed
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header != INTERACTION_HEADERS:
        raise ValueError(f"Unexpected interactions header: {header}")

    records = []
    for row in reader:
        if not row:
            continue
        (timestamp, session_id, participant_id, x, y, feature_id, feature_name,
         feature_type, interaction_type, duration) = row
        records.append(InteractionRecord(
            timestamp=float(timestamp),
            session_id=session_id,
            participant_id=participant_id,
            x=float(x),
            y=float(y),
            feature_id=_parse_opt_str(feature_id),
            feature_name=_parse_opt_str(feature_name),
            feature_type=_parse_opt_str(feature_type),
            interaction_type=InteractionType(interaction_type),
            duration=_parse_opt_float(duration),
        ))
    return records


def _data_rows(csv_text: str) -> str:
    """Drop the header line of a CSV document."""
    return csv_text.split('\n', 1)[1]


def _comment_block(lines: Iterable[str]) -> str:
    return ''.join(f"# {line}\n" for line in lines)


def quick_statistics(session: InteractionSession, generated_at: datetime) -> str:
    interactions = session.interactions
    gestures = session.gestures

    feature_interactions = [r for r in interactions if r.feature_id is not None]
    outside = [r for r in interactions if r.interaction_type == InteractionType.OUTSIDE_TOUCH]
    unique_features = {r.feature_id for r in feature_interactions}

    return _comment_block([
        f"Total Interactions: {len(interactions)}",
        f"Total Gestures: {len(gestures)}",
        f"Feature Interactions: {len(feature_interactions)}",
        f"Outside-Plan Touches: {len(outside)}",
        f"Unique Features Discovered: {len(unique_features)}",
        f"Logging Status: {'Active' if session.is_logging_enabled else 'Inactive'}",
        f"Export Time: {generated_at.isoformat(sep=' ', timespec='seconds')}",
        "Data Format: CSV",
    ])


def combined_export(session: InteractionSession,
                    now: Callable[[], float] = time.time) -> str:
    """
    One text document with metadata, the three CSV sections and quick statistics.

    Comment lines start with '#'. Each section is its own header plus rows;
    an empty section carries a '# No ... data recorded' line instead of rows.
    """
    generated_at = datetime.fromtimestamp(now())
    parts = [
        _comment_block([
            f"{ExportConfig.APP_NAME} Research Data Export",
            f"Generated: {generated_at.isoformat(sep=' ', timespec='seconds')}",
            f"App Version: {ExportConfig.APP_VERSION}",
        ]),
        "\n",
        "# Session Summary\n",
        _comment_block(session.session_summary().splitlines()),
        "\n",
    ]

    sections = [
        ("INTERACTIONS", "interaction", INTERACTION_HEADERS, interactions_to_csv(session.interactions),
         session.interactions),
        ("GESTURES", "gesture", GESTURE_HEADERS, gestures_to_csv(session.gestures), session.gestures),
        ("SESSIONS", "session", SESSION_HEADERS, sessions_to_csv(session.sessions, now), session.sessions),
    ]
    for title, noun, headers, csv_text, records in sections:
        parts.append(f"# {title} DATA\n")
        parts.append(','.join(headers) + '\n')
        if records:
            parts.append(_data_rows(csv_text))
        else:
            parts.append(f"# No {noun} data recorded\n")
        parts.append("\n")

    parts.append("# QUICK STATISTICS\n")
    parts.append(quick_statistics(session, generated_at))
    return ''.join(parts)


# ==================== File output ====================

def write_export(content: str, directory: Union[str, Path], filename: str) -> Path:
    """
    Write an export document.

    Raises:
        ExportError: If the directory cannot be created or the file cannot be written
    """
    path = Path(directory) / filename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to export {filename}: {e}")
        raise ExportError(f"Failed to export {filename}: {e}") from e

    logger.info(f"Exported: {path}")
    return path


class ResearchExporter:
    """
    Writes the data of an InteractionSession to disk.
    """

    def __init__(self, session: InteractionSession, clock: Callable[[], float] = time.time):
        self.session = session
        self._clock = clock

    def export_all(self, directory: Union[str, Path]) -> List[Path]:
        """
        Write interactions, gestures and sessions as three CSV files.

        A file that fails to write is logged and skipped; the others are still written.

        Returns:
            list: Paths of the files that were written
        """
        documents = [
            (ExportConfig.INTERACTIONS_FILENAME, interactions_to_csv(self.session.interactions)),
            (ExportConfig.GESTURES_FILENAME, gestures_to_csv(self.session.gestures)),
            (ExportConfig.SESSIONS_FILENAME, sessions_to_csv(self.session.sessions, self._clock)),
        ]

        exported = []
        for filename, content in documents:
            try:
                exported.append(write_export(content, directory, filename))
            except ExportError as e:
                logger.warning(f"Skipping {filename}: {e}")
        return exported

    def quick_export(self, directory: Union[str, Path]) -> Path:
        """
        Write the combined export to a timestamped file.

        Raises:
            ExportError: If the file cannot be written
        """
        timestamp = int(self._clock())
        filename = ExportConfig.QUICK_EXPORT_PATTERN.format(timestamp=timestamp)
        return write_export(combined_export(self.session, self._clock), directory, filename)

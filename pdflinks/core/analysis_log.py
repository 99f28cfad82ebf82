"""
Append-only event collector for an analysis run.
Every event is also forwarded to loguru so operators see it live.
"""

import threading
from datetime import datetime
from typing import Iterable, List, Optional, Union

from loguru import logger

from .models import LogEvent, Severity

DEFAULT_MAX_MESSAGE_LENGTH = 500

_LOGURU_LEVELS = {
    Severity.INFO: 'INFO',
    Severity.WARN: 'WARNING',
    Severity.ERROR: 'ERROR',
}


class AnalysisLog:
    """Thread-safe list of LogEvents with bounded message length."""

    def __init__(self, max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH, forward: bool = True):
        self.max_message_length = max(max_message_length, 4)
        self.forward = forward
        self._events: List[LogEvent] = []
        self._lock = threading.Lock()

    @property
    def events(self) -> List[LogEvent]:
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _truncate(self, message: str) -> str:
        if len(message) <= self.max_message_length:
            return message
        return message[:self.max_message_length - 3] + '...'

    def append(self, timestamp: Optional[datetime], severity: Union[Severity, str], message) -> None:
        """Record one event. Never raises."""
        self._record(timestamp, severity, message)

    def _record(self, timestamp, severity, message) -> None:
        # Always two frames below the caller: append/info/warn/error -> _record
        try:
            if not isinstance(severity, Severity):
                severity = Severity(str(severity).lower())
            event = LogEvent(
                timestamp=timestamp or datetime.now(),
                severity=severity,
                message=self._truncate(str(message)),
            )
            with self._lock:
                self._events.append(event)
            if self.forward:
                logger.opt(depth=2).log(_LOGURU_LEVELS[severity], event.message)
        except Exception as e:
            logger.debug(f"Dropped analysis log event: {e}")

    def extend(self, events: Iterable[LogEvent]) -> None:
        """Merge already-recorded events (e.g. from a page worker) without re-forwarding them."""
        events = list(events)
        with self._lock:
            self._events.extend(events)

    def info(self, message: str) -> None:
        self._record(None, Severity.INFO, message)

    def warn(self, message: str) -> None:
        self._record(None, Severity.WARN, message)

    def error(self, message: str) -> None:
        self._record(None, Severity.ERROR, message)

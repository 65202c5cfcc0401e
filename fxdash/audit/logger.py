"""
Rate Event Logger

DESIGN DECISION: Every cache access and refresh attempt is logged.
This provides:
1. Traceability of where the displayed rates came from
2. Debugging capability when the FX service is down
3. A short history the settings page can display

The logger:
- Never raises (logging must not break rendering)
- Keeps a bounded in-memory history of recent events
"""

import logging
from collections import deque
from typing import Optional

import structlog

from fxdash.models.events import RateEvent, RateEventSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_log_level(level: str) -> None:
    """Set the stdlib level structlog filters against."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("fxdash").setLevel(level)


class RateEventLogger:
    """
    Central logging service for the rate subsystem.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory ring buffer (for display)
    """

    def __init__(self, history_size: int = 50):
        self._history: deque[RateEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("fxdash.rates")

    def log(self, event: RateEvent) -> None:
        """Log a rate event. Failures to log are ignored."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity == RateEventSeverity.ERROR:
                self._logger.error("rate_event", **log_dict)
            elif event.severity == RateEventSeverity.WARNING:
                self._logger.warning("rate_event", **log_dict)
            elif event.severity == RateEventSeverity.DEBUG:
                self._logger.debug("rate_event", **log_dict)
            else:
                self._logger.info("rate_event", **log_dict)
        except Exception:
            # A broken log handler must never reach the UI
            pass

    def recent(self, limit: Optional[int] = None) -> list[RateEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events[:limit] if limit is not None else events

    def last_error(self) -> Optional[RateEvent]:
        """Most recent error-level event, if any."""
        for event in reversed(self._history):
            if event.severity == RateEventSeverity.ERROR:
                return event
        return None

    def clear(self) -> None:
        self._history.clear()

    def __len__(self) -> int:
        return len(self._history)

"""
Rate Event Models for FX Dashboard

Every cache read/write and every refresh attempt produces an event.
This gives:
1. A trace of why rates are (or are not) fresh
2. Debugging information when the FX service misbehaves
3. A short history the settings page can show
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class RateEventType(str, Enum):
    """Types of events the rate subsystem records."""
    # Durable cache
    CACHE_LOADED = "cache_loaded"
    CACHE_MISSING = "cache_missing"
    CACHE_CORRUPT = "cache_corrupt"
    CACHE_WRITE_FAILED = "cache_write_failed"

    # Refresh lifecycle
    REFRESH_SKIPPED = "refresh_skipped"
    REFRESH_STARTED = "refresh_started"
    REFRESH_JOINED = "refresh_joined"
    REFRESH_SUCCEEDED = "refresh_succeeded"
    REFRESH_FAILED = "refresh_failed"

    # Subscribers
    LISTENER_FAILED = "listener_failed"


class RateEventSeverity(str, Enum):
    """Severity level for rate events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class RateEvent(BaseModel):
    """A single rate subsystem event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: RateEventType
    severity: RateEventSeverity = RateEventSeverity.INFO
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class RateEventBuilder:
    """
    Helper class to build rate events with common patterns.

    Usage:
        event = RateEventBuilder.cache_loaded("fxRates_THB_cache_v2", 3, 0)
        event = RateEventBuilder.refresh_failed("https://...", "timeout")
    """

    @staticmethod
    def cache_loaded(key: str, currency_count: int, last_updated: int) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.CACHE_LOADED,
            description=f"Loaded {currency_count} cached rates",
            details={
                "key": key,
                "currency_count": currency_count,
                "last_updated": last_updated,
            },
        )

    @staticmethod
    def cache_missing(key: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.CACHE_MISSING,
            severity=RateEventSeverity.DEBUG,
            description="No cached rates, starting cold",
            details={"key": key},
        )

    @staticmethod
    def cache_corrupt(key: str, reason: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.CACHE_CORRUPT,
            severity=RateEventSeverity.WARNING,
            description="Cached rates unreadable, starting cold",
            details={"key": key},
            error_message=reason,
        )

    @staticmethod
    def cache_write_failed(key: str, reason: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.CACHE_WRITE_FAILED,
            severity=RateEventSeverity.WARNING,
            description="Could not persist rates",
            details={"key": key},
            error_message=reason,
        )

    @staticmethod
    def refresh_skipped(last_updated: int) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.REFRESH_SKIPPED,
            severity=RateEventSeverity.DEBUG,
            description="Rates fresh and complete, no fetch needed",
            details={"last_updated": last_updated},
        )

    @staticmethod
    def refresh_started(url: str, reason: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.REFRESH_STARTED,
            description=f"Fetching rates ({reason})",
            details={"url": url, "reason": reason},
        )

    @staticmethod
    def refresh_joined() -> RateEvent:
        return RateEvent(
            event_type=RateEventType.REFRESH_JOINED,
            severity=RateEventSeverity.DEBUG,
            description="Refresh already in flight, waiting on it",
        )

    @staticmethod
    def refresh_succeeded(currency_count: int, last_updated: int) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.REFRESH_SUCCEEDED,
            description=f"Fetched {currency_count} rates",
            details={
                "currency_count": currency_count,
                "last_updated": last_updated,
            },
        )

    @staticmethod
    def refresh_failed(url: str, reason: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.REFRESH_FAILED,
            severity=RateEventSeverity.ERROR,
            description="Rate fetch failed, keeping previous rates",
            details={"url": url},
            error_message=reason,
        )

    @staticmethod
    def listener_failed(listener: str, reason: str) -> RateEvent:
        return RateEvent(
            event_type=RateEventType.LISTENER_FAILED,
            severity=RateEventSeverity.WARNING,
            description="Snapshot listener raised",
            details={"listener": listener},
            error_message=reason,
        )

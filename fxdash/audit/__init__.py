"""Rate event logging package."""

from fxdash.audit.logger import RateEventLogger, configure_log_level

__all__ = ["RateEventLogger", "configure_log_level"]

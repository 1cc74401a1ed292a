"""Cross-cutting infrastructure (logging, timing)."""

from bootval.infrastructure.logging import get_logger, setup_logging, timed

__all__ = ["get_logger", "setup_logging", "timed"]

"""Observability: logging, warning sink and metrics for the broker."""

from pubst.observability.logger import get_logger, warning_sink
from pubst.observability.metrics import Metrics

__all__ = ["get_logger", "warning_sink", "Metrics"]

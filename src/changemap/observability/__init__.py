"""Observability — structured logging helpers."""

from changemap.observability.logging import correlation_id, get_correlation_id, log_step, setup_logging

__all__ = ["correlation_id", "get_correlation_id", "log_step", "setup_logging"]

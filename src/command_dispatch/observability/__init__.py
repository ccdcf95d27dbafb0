"""Observability – structured logging."""
from command_dispatch.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]

"""Application CQRS – LoggingCommandBus: hook implementation emitting structlog events."""
from __future__ import annotations

import time
from contextvars import ContextVar
from typing import Any

from command_dispatch.application.cqrs.bus import CommandBus
from command_dispatch.application.cqrs.commands import Command, CommandResult
from command_dispatch.observability.logging import get_logger

logger = get_logger(__name__)

_started_at: ContextVar[float | None] = ContextVar("command_started_at", default=None)


class LoggingCommandBus(CommandBus):
    """Log command start/end with timing.

    Events: ``command.started``, ``command.completed`` (``duration_ms``,
    ``has_result``) and ``command.failed`` (``error``, ``duration_ms``).
    """

    def before_execute_command(self, command_id: str, command: Command) -> None:
        _started_at.set(time.perf_counter())
        logger.info("command.started", command_id=command_id, command=type(command).__name__)

    def on_command_executed(
        self, command_id: str, command: Command, result: CommandResult[Any]
    ) -> None:
        logger.info(
            "command.completed",
            command_id=command_id,
            command=type(command).__name__,
            duration_ms=self._elapsed_ms(),
            has_result=result.is_present(),
        )

    def on_command_exception(
        self, command_id: str, command: Command, exception: Exception
    ) -> None:
        logger.error(
            "command.failed",
            command_id=command_id,
            command=type(command).__name__,
            error=repr(exception),
            duration_ms=self._elapsed_ms(),
        )

    def after_handle_finally(self) -> None:
        _started_at.set(None)

    @staticmethod
    def _elapsed_ms() -> float | None:
        started = _started_at.get()
        if started is None:
            return None
        return round((time.perf_counter() - started) * 1000, 2)


__all__ = ["LoggingCommandBus"]

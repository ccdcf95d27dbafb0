"""Application – command dispatch building blocks (framework-agnostic)."""

from command_dispatch.application.cqrs import (
    BusMode,
    Command,
    CommandBus,
    CommandHandler,
    CommandResult,
    HandlerRegistry,
    LoggingCommandBus,
    command_handler,
)

__all__ = [
    "BusMode",
    "Command",
    "CommandBus",
    "CommandHandler",
    "CommandResult",
    "HandlerRegistry",
    "LoggingCommandBus",
    "command_handler",
]

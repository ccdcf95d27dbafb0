"""Application CQRS – commands, handlers, registry, coercion and the command bus."""
from command_dispatch.application.cqrs.coercion import ConstructorSignature, coerce, resolve_constructor
from command_dispatch.application.cqrs.commands import Command, CommandHandler, CommandResult
from command_dispatch.application.cqrs.registry import HandlerRegistry
from command_dispatch.application.cqrs.cli import CliInvocation, is_cli_mode
from command_dispatch.application.cqrs.bus import BusMode, CommandBus
from command_dispatch.application.cqrs.logging_bus import LoggingCommandBus
from command_dispatch.application.cqrs.decorators import command_handler

__all__ = [
    "BusMode",
    "CliInvocation",
    "Command",
    "CommandBus",
    "CommandHandler",
    "CommandResult",
    "ConstructorSignature",
    "HandlerRegistry",
    "LoggingCommandBus",
    "coerce",
    "command_handler",
    "is_cli_mode",
    "resolve_constructor",
]

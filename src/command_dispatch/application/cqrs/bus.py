"""Application CQRS – CommandBus: typed and command-line dispatch.

Lifecycle::

    IDLE ──start(argv)──▶ INITIALIZING ──▶ WEB   (no selector token)
                                      └──▶ CLI   (selector token; one dispatch)

Every invocation runs the same hook protocol::

    try:
        before_execute_command(id, command)
        handler.handle(command, result)
        on_command_executed(id, command, result)
    except Exception as exc:
        on_command_exception(id, command, exc)   # typed: re-raise, CLI: swallow
    finally:
        after_handle_finally()
"""
from __future__ import annotations

import enum
from typing import Any, Iterable, Sequence

from command_dispatch.application.cqrs.cli import CliInvocation, is_cli_mode
from command_dispatch.application.cqrs.coercion import resolve_constructor
from command_dispatch.application.cqrs.commands import Command, CommandHandler, CommandResult
from command_dispatch.application.cqrs.registry import HandlerRegistry
from command_dispatch.config.settings import BusSettings
from command_dispatch.kernel.errors import BusStateError
from command_dispatch.observability.logging import get_logger

logger = get_logger(__name__)


class BusMode(str, enum.Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    WEB = "web"
    CLI = "cli"


class CommandBus:
    """Dispatches commands to the handlers it was given.

    Subclass and override the four hook methods to attach cross-cutting
    behaviour; they are no-ops here and never change error propagation.
    """

    def __init__(
        self,
        handlers: Iterable[CommandHandler[Any, Any]],
        *,
        settings: BusSettings | None = None,
    ) -> None:
        self._handlers = tuple(handlers)
        self._settings = settings or BusSettings()
        self._registry: HandlerRegistry | None = None
        self._mode = BusMode.IDLE
        self._cli_result: CommandResult[Any] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def mode(self) -> BusMode:
        return self._mode

    @property
    def settings(self) -> BusSettings:
        return self._settings

    @property
    def registry(self) -> HandlerRegistry:
        if self._registry is None:
            raise BusStateError("Command bus has not been started")
        return self._registry

    @property
    def cli_result(self) -> CommandResult[Any] | None:
        """Result of the startup CLI dispatch (``None`` in web mode or if aborted)."""
        return self._cli_result

    def is_cli_mode(self) -> bool:
        return self._mode is BusMode.CLI

    def start(self, argv: Sequence[str]) -> CommandBus:
        """Build the registry, fix the mode, and run the CLI command if selected.

        Must be called exactly once, before any dispatch.
        """
        if self._mode is not BusMode.IDLE:
            raise BusStateError(f"Command bus already started (mode={self._mode.value})")
        self._mode = BusMode.INITIALIZING
        self._registry = HandlerRegistry.build(self._handlers)

        argv = list(argv)
        cli = is_cli_mode(argv, self._settings.command_flag)
        self._mode = BusMode.CLI if cli else BusMode.WEB
        logger.info("bus.started", mode=self._mode.value, command_ids=self._registry.command_ids())

        if cli:
            self._cli_result = self.dispatch_cli(argv)
        return self

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, command: Command) -> CommandResult[Any]:
        """Dispatch *command* to its handler and return the result container.

        A command type with no registered handler yields an empty result and
        runs no hooks. Handler exceptions are reported to
        :meth:`on_command_exception` and re-raised.
        """
        found = self.registry.resolve_by_type(type(command))
        if found.is_none():
            logger.debug("command.unhandled", command_type=type(command).__name__)
            return CommandResult()
        handler = found.unwrap()
        return self._invoke(handler.resolve_command_id(), handler, command, propagate=True)

    def dispatch_cli(self, argv: Sequence[str]) -> CommandResult[Any] | None:
        """Build the selected command from *argv* and run it.

        Returns ``None`` when the id is unknown, no constructor accepts the
        arguments, or the selected constructor itself raises (all reported as
        diagnostics). Handler exceptions are reported to
        :meth:`on_command_exception` and not re-raised.

        Raises:
            MissingCommandSelectorError: *argv* selects no command.
        """
        registry = self.registry
        invocation = CliInvocation.parse(
            argv,
            command_flag=self._settings.command_flag,
            argument_flag=self._settings.argument_flag,
        )
        log = logger.bind(command_id=invocation.command_id)

        found = registry.resolve_by_id(invocation.command_id)
        if found.is_none():
            log.error("cli.command_not_found", known_command_ids=registry.command_ids())
            return None
        command_type, handler = found.unwrap()

        try:
            built = resolve_constructor(
                invocation.arguments,
                registry.constructors_for(command_type),
                command_name=command_type.__name__,
            )
        except Exception as exc:
            log.error(
                "cli.constructor_incompatible",
                reason=f"constructor rejected the supplied arguments: {exc}",
                arguments=list(invocation.arguments),
                exc_info=exc,
            )
            return None
        if built.is_err():
            log.error(
                "cli.constructor_incompatible",
                reason="constructor incompatible with supplied arguments",
                arguments=list(invocation.arguments),
                tried_arities=list(built.error.tried_arities),
            )
            return None

        return self._invoke(invocation.command_id, handler, built.unwrap(), propagate=False)

    def _invoke(
        self,
        command_id: str,
        handler: CommandHandler[Any, Any],
        command: Command,
        *,
        propagate: bool,
    ) -> CommandResult[Any]:
        result: CommandResult[Any] = CommandResult()
        try:
            self.before_execute_command(command_id, command)
            handler.handle(command, result)
            self.on_command_executed(command_id, command, result)
        except Exception as exc:
            self.on_command_exception(command_id, command, exc)
            if propagate:
                raise
            logger.error("cli.command_failed", command_id=command_id, exc_info=exc)
        finally:
            self.after_handle_finally()
        return result

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before_execute_command(self, command_id: str, command: Command) -> None:
        """Called before the handler runs; an exception here is treated as a handler failure."""

    def on_command_executed(
        self, command_id: str, command: Command, result: CommandResult[Any]
    ) -> None:
        """Called after the handler returned normally."""

    def on_command_exception(
        self, command_id: str, command: Command, exception: Exception
    ) -> None:
        """Called when the handler or another hook in the try block raised."""

    def after_handle_finally(self) -> None:
        """Called exactly once per invocation, whatever the outcome."""


__all__ = ["BusMode", "CommandBus"]

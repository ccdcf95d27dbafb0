"""Bootstrap – the single startup event for a command bus.

Usage::

    from command_dispatch.bootstrap import bootstrap

    bus = bootstrap([AddHandler(), GreetHandler()])
    if not bus.is_cli_mode():
        serve(bus)          # web mode: dispatch typed commands with bus.handle()
"""
from __future__ import annotations

import sys
from typing import Any, Iterable, Sequence

from command_dispatch.application.cqrs import CommandBus, CommandHandler
from command_dispatch.config.settings import BusSettings, EnvSettingsLoader
from command_dispatch.observability.logging import JsonLoggerFactory


def bootstrap(
    handlers: Iterable[CommandHandler[Any, Any]],
    argv: Sequence[str] | None = None,
    *,
    bus_class: type[CommandBus] = CommandBus,
    settings: BusSettings | None = None,
    configure_logging: bool = False,
) -> CommandBus:
    """Create a bus over *handlers*, start it once, and return it.

    Parameters
    ----------
    handlers:
        Handler instances supplied by the hosting process.
    argv:
        Process arguments without the program name; defaults to
        ``sys.argv[1:]``.
    bus_class:
        :class:`CommandBus` subclass carrying the deployment's hooks.
    settings:
        Explicit settings; loaded from ``COMMAND_BUS_*`` env vars when omitted.
    configure_logging:
        Route structlog output as JSON at ``settings.log_level``.
    """
    if settings is None:
        settings = EnvSettingsLoader().load(BusSettings)
    if configure_logging:
        JsonLoggerFactory.configure(settings.log_level_number)
    bus = bus_class(handlers, settings=settings)
    return bus.start(sys.argv[1:] if argv is None else argv)


__all__ = ["bootstrap"]

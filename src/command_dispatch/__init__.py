"""
command_dispatch – typed command registry, bus and CLI dispatch core.

Import path convention::

    from command_dispatch.application.cqrs import Command, CommandHandler, CommandBus
    from command_dispatch.bootstrap import bootstrap
    from command_dispatch.kernel.errors import AbsentResultError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

"""Application CQRS – @command_handler declaration decorator."""
from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from command_dispatch.application.cqrs.coercion import ConstructorSignature
from command_dispatch.application.cqrs.commands import Command, CommandHandler

H = TypeVar("H", bound=type[CommandHandler[Any, Any]])


def command_handler(
    command_id: str,
    *,
    command_type: type[Command] | None = None,
    constructors: Sequence[Callable[..., Any] | ConstructorSignature] = (),
) -> Callable[[H], H]:
    """Class decorator declaring a handler's command id (and optionally its
    command type and CLI constructors).

    Usage::

        @command_handler("add", constructors=[AddNumbers, AddNumbers.from_text])
        class AddHandler(CommandHandler[AddNumbers, int]):
            def handle(self, command: AddNumbers, result: CommandResult[int]) -> None:
                result.put(command.left + command.right)

    Plain callables in *constructors* are read with
    :meth:`ConstructorSignature.from_callable` when the decorator runs.
    Nothing is registered globally; pass handler instances to the bus.
    """
    signatures = tuple(
        c if isinstance(c, ConstructorSignature) else ConstructorSignature.from_callable(c)
        for c in constructors
    )

    def decorator(handler_class: H) -> H:
        handler_class.command_id = command_id
        if command_type is not None:
            handler_class.command_type = command_type
        if signatures:
            handler_class.constructors = signatures
        return handler_class

    return decorator


__all__ = ["command_handler"]

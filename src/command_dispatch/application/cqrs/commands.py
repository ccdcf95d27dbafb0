"""Application CQRS – Command, CommandResult, CommandHandler."""
from __future__ import annotations

import abc
import sys
from typing import Any, ClassVar, ForwardRef, Generic, Sequence, TypeVar, get_args, get_origin

from command_dispatch.application.cqrs.coercion import ConstructorSignature
from command_dispatch.config.validation import HandlerConfigurationError
from command_dispatch.kernel.errors import AbsentResultError

C = TypeVar("C", bound="Command")
R = TypeVar("R")

_ABSENT: Any = object()


class Command:
    """Marker base for commands (immutable payload describing one unit of work).

    Declare concrete commands as frozen dataclasses::

        @dataclasses.dataclass(frozen=True)
        class AddNumbers(Command):
            left: int
            right: int
    """


class CommandResult(Generic[R]):
    """Single-slot result sink handed to a handler for one invocation.

    Presence is tracked independently of the value: after ``put(None)``
    :meth:`is_present` is ``True`` and :meth:`get` returns ``None``.
    A second ``put`` overwrites the first.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: Any = _ABSENT

    def put(self, value: R) -> None:
        self._value = value

    def get(self) -> R:
        """Return the value, or raise :class:`AbsentResultError` if none was put."""
        if self._value is _ABSENT:
            raise AbsentResultError()
        return self._value

    def is_present(self) -> bool:
        return self._value is not _ABSENT

    def __repr__(self) -> str:
        if self._value is _ABSENT:
            return "CommandResult(<absent>)"
        return f"CommandResult({self._value!r})"


class CommandHandler(abc.ABC, Generic[C, R]):
    """Handle a single command type under a single string command id.

    The command type comes from ``command_type`` when set, otherwise from the
    first generic argument::

        class AddHandler(CommandHandler[AddNumbers, int]):
            command_id = "add"

            def handle(self, command: AddNumbers, result: CommandResult[int]) -> None:
                result.put(command.left + command.right)

    ``constructors`` lists the signatures the CLI path may use to build the
    command from strings; empty means "the command class's own ``__init__``".
    """

    command_id: ClassVar[str]
    command_type: ClassVar[type[Command] | None] = None
    constructors: ClassVar[Sequence[ConstructorSignature]] = ()

    def handle(self, command: C, result: CommandResult[R]) -> None:  # noqa: ARG002
        """Run the command and report output into *result*.

        Defaults to :meth:`execute` for handlers that produce no output.
        """
        self.execute(command)

    def execute(self, command: C) -> None:  # noqa: ARG002
        """Single-argument form of :meth:`handle`; a no-op unless overridden."""

    # ------------------------------------------------------------------
    # Declaration introspection (used once, by the registry)
    # ------------------------------------------------------------------

    @classmethod
    def resolve_command_type(cls) -> type[Command]:
        candidate: Any = cls.command_type
        if candidate is None:
            candidate = cls._command_type_from_generic_base()
        if not (isinstance(candidate, type) and issubclass(candidate, Command)):
            raise HandlerConfigurationError(
                cls, f"command type {candidate!r} is not a Command subclass"
            )
        return candidate

    @classmethod
    def resolve_command_id(cls) -> str:
        command_id = getattr(cls, "command_id", None)
        if not isinstance(command_id, str) or not command_id:
            raise HandlerConfigurationError(cls, "command_id must be a non-empty string")
        return command_id

    def candidate_constructors(self) -> tuple[ConstructorSignature, ...]:
        if self.constructors:
            return tuple(self.constructors)
        return (ConstructorSignature.from_callable(self.resolve_command_type()),)

    @classmethod
    def _command_type_from_generic_base(cls) -> Any:
        for klass in cls.__mro__:
            for base in klass.__dict__.get("__orig_bases__", ()):
                if get_origin(base) is not CommandHandler:
                    continue
                args = get_args(base)
                if not args or isinstance(args[0], TypeVar):
                    continue
                arg = args[0]
                if isinstance(arg, ForwardRef):
                    module = sys.modules.get(klass.__module__)
                    arg = getattr(module, arg.__forward_arg__, None)
                return arg
        raise HandlerConfigurationError(
            cls, "cannot determine command type; parametrise CommandHandler or set command_type"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(command_id={getattr(self, 'command_id', None)!r})"


__all__ = ["Command", "CommandHandler", "CommandResult"]

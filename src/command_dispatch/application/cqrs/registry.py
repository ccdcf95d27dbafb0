"""Application CQRS – HandlerRegistry: command type ↔ handler ↔ command id."""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from command_dispatch.application.cqrs.coercion import ConstructorSignature
from command_dispatch.application.cqrs.commands import Command, CommandHandler
from command_dispatch.kernel.types import Nothing, Option, Some
from command_dispatch.observability.logging import get_logger

logger = get_logger(__name__)


class HandlerRegistry:
    """Immutable lookup tables built once from a collection of handlers.

    Use :meth:`build`; instances are read-only afterwards and safe to share
    between threads.
    """

    __slots__ = ("_by_type", "_by_id", "_constructors")

    def __init__(
        self,
        by_type: Mapping[type[Command], CommandHandler[Any, Any]],
        by_id: Mapping[str, type[Command]],
        constructors: Mapping[type[Command], tuple[ConstructorSignature, ...]],
    ) -> None:
        self._by_type = MappingProxyType(dict(by_type))
        self._by_id = MappingProxyType(dict(by_id))
        self._constructors = MappingProxyType(dict(constructors))

    @classmethod
    def build(cls, handlers: Iterable[CommandHandler[Any, Any]]) -> HandlerRegistry:
        """Record every handler's command type, id and constructors in one pass.

        A later handler declaring an already-seen id or command type replaces
        the earlier mapping. Malformed declarations raise
        :class:`~command_dispatch.config.validation.HandlerConfigurationError`.
        """
        by_type: dict[type[Command], CommandHandler[Any, Any]] = {}
        by_id: dict[str, type[Command]] = {}
        constructors: dict[type[Command], tuple[ConstructorSignature, ...]] = {}

        for handler in handlers:
            command_type = handler.resolve_command_type()
            command_id = handler.resolve_command_id()
            if command_id in by_id:
                logger.warning(
                    "registry.command_id_overwritten",
                    command_id=command_id,
                    previous=by_id[command_id].__name__,
                    current=command_type.__name__,
                )
            by_type[command_type] = handler
            by_id[command_id] = command_type
            constructors[command_type] = handler.candidate_constructors()

        logger.debug("registry.built", command_ids=sorted(by_id))
        return cls(by_type, by_id, constructors)

    def resolve_by_type(self, command_type: type[Command]) -> Option[CommandHandler[Any, Any]]:
        handler = self._by_type.get(command_type)
        return Nothing() if handler is None else Some(handler)

    def resolve_by_id(
        self, command_id: str
    ) -> Option[tuple[type[Command], CommandHandler[Any, Any]]]:
        command_type = self._by_id.get(command_id)
        if command_type is None:
            return Nothing()
        return Some((command_type, self._by_type[command_type]))

    def constructors_for(self, command_type: type[Command]) -> tuple[ConstructorSignature, ...]:
        return self._constructors.get(command_type, ())

    def command_ids(self) -> list[str]:
        return sorted(self._by_id)

    def __len__(self) -> int:
        return len(self._by_type)

    def __contains__(self, command_type: object) -> bool:
        return command_type in self._by_type

    def __repr__(self) -> str:
        return f"HandlerRegistry(command_ids={self.command_ids()!r})"


__all__ = ["HandlerRegistry"]

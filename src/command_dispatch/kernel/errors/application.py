"""Application-layer errors raised by the command dispatch core."""

from __future__ import annotations

from typing import Any, Sequence

from command_dispatch.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Failure at the use-case / dispatch level."""

    default_code = "application_error"


class AbsentResultError(ApplicationError, LookupError):
    """``CommandResult.get()`` was called before any value was put."""

    default_code = "absent_result"

    def __init__(self, message: str = "No result present", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ConstructorResolutionError(ApplicationError):
    """No candidate constructor accepts the supplied raw arguments."""

    default_code = "constructor_incompatible"

    def __init__(
        self,
        command_name: str,
        raw_args: Sequence[str],
        tried_arities: Sequence[int] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Constructor of {command_name} is incompatible with "
            f"supplied arguments {list(raw_args)!r}",
            detail={
                "command": command_name,
                "arguments": list(raw_args),
                "tried_arities": list(tried_arities),
            },
            **kwargs,
        )
        self.command_name = command_name
        self.raw_args = tuple(raw_args)
        self.tried_arities = tuple(tried_arities)


class MissingCommandSelectorError(ApplicationError):
    """CLI dispatch was requested but argv carries no command-selector token."""

    default_code = "missing_command_selector"

    def __init__(self, flag: str, **kwargs: Any) -> None:
        super().__init__(f"No '{flag}<id>' token found in arguments", **kwargs)
        self.flag = flag


class BusStateError(ApplicationError):
    """The bus was used out of its lifecycle order (not started / started twice)."""

    default_code = "bus_state_error"


__all__ = [
    "AbsentResultError",
    "ApplicationError",
    "BusStateError",
    "ConstructorResolutionError",
    "MissingCommandSelectorError",
]

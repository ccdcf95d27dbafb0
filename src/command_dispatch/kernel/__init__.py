"""Kernel – framework-agnostic building blocks (errors, option/result types)."""

from command_dispatch.kernel.errors import (
    AbsentResultError,
    ApplicationError,
    BaseError,
    BusStateError,
    ConstructorResolutionError,
    MissingCommandSelectorError,
)

__all__ = [
    "AbsentResultError",
    "ApplicationError",
    "BaseError",
    "BusStateError",
    "ConstructorResolutionError",
    "MissingCommandSelectorError",
]

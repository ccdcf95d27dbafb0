"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    └── ApplicationError              (application.py)
        ├── AbsentResultError
        ├── ConstructorResolutionError
        ├── MissingCommandSelectorError
        └── BusStateError

Configuration errors (``ConfigError`` and friends) live in
:mod:`command_dispatch.config.validation` and also derive from
``ApplicationError``.
"""

from command_dispatch.kernel.errors.application import (
    AbsentResultError,
    ApplicationError,
    BusStateError,
    ConstructorResolutionError,
    MissingCommandSelectorError,
)
from command_dispatch.kernel.errors.base import BaseError

__all__ = [
    "AbsentResultError",
    "ApplicationError",
    "BaseError",
    "BusStateError",
    "ConstructorResolutionError",
    "MissingCommandSelectorError",
]

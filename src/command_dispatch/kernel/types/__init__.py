"""Kernel value types — public re-export surface.

Modules:
  option.py — Some, Nothing, Option (registry lookups)
  result.py — Ok, Err, Result (constructor resolution)
"""

from command_dispatch.kernel.types.option import Nothing, Option, Some
from command_dispatch.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Nothing", "Ok", "Option", "Result", "Some"]

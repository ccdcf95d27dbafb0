"""Application CQRS – constructor signatures and string argument coercion.

Resolution is greedy: candidates are tried in declared order and the first
one whose arity matches and whose every parameter coerces is used. A value
that is valid for several candidates always goes to the earliest one.
"""
from __future__ import annotations

import dataclasses
import inspect
import re
import types
from typing import Any, Callable, Sequence, Union, get_args, get_origin

from command_dispatch.config.validation import HandlerConfigurationError
from command_dispatch.kernel.errors import ConstructorResolutionError
from command_dispatch.kernel.types import Err, Ok, Result
from command_dispatch.observability.logging import get_logger

logger = get_logger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BOOLEANS = {"true": True, "false": False}


def coerce(raw: str, declared: Any) -> Any:
    """Convert *raw* into *declared*; raise :class:`ValueError` when it cannot.

    Integers and floats must be plain decimal literals: no surrounding
    whitespace, underscores, ``nan`` or ``inf``. Union annotations such as
    ``str | None`` try each non-``None`` member in declaration order.
    """
    if declared is bool:
        try:
            return _BOOLEANS[raw.lower()]
        except KeyError:
            raise ValueError(f"invalid boolean literal {raw!r}") from None
    if declared is int:
        if not _INTEGER.fullmatch(raw):
            raise ValueError(f"invalid base-10 integer {raw!r}")
        return int(raw)
    if declared is float:
        if not _DECIMAL.fullmatch(raw):
            raise ValueError(f"invalid decimal number {raw!r}")
        return float(raw)
    if get_origin(declared) in (Union, types.UnionType):
        for member in get_args(declared):
            if member is type(None):
                continue
            try:
                return coerce(raw, member)
            except ValueError:
                continue
        raise ValueError(f"no member of {declared!r} accepts {raw!r}")
    if declared is Any or (isinstance(declared, type) and isinstance(raw, declared)):
        return raw
    raise ValueError(f"cannot cast string to {declared!r}")


@dataclasses.dataclass(frozen=True)
class ConstructorSignature:
    """A way to build a command: a factory plus its positional parameter types."""

    factory: Callable[..., Any]
    parameter_types: tuple[Any, ...]

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @classmethod
    def from_callable(cls, factory: Callable[..., Any]) -> ConstructorSignature:
        """Read the positional parameters of *factory* (a class or callable).

        Unannotated parameters accept the raw string. Keyword-only parameters
        must have defaults and are never filled from the command line.
        """
        try:
            signature = inspect.signature(factory, eval_str=True)
        except (NameError, TypeError, ValueError) as exc:
            raise HandlerConfigurationError(factory, f"unreadable constructor signature: {exc}") from exc

        parameter_types: list[Any] = []
        for param in signature.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                raise HandlerConfigurationError(
                    factory, f"variadic parameter {param.name!r} is not supported"
                )
            if param.kind is param.KEYWORD_ONLY:
                if param.default is param.empty:
                    raise HandlerConfigurationError(
                        factory, f"keyword-only parameter {param.name!r} needs a default"
                    )
                continue
            parameter_types.append(object if param.annotation is param.empty else param.annotation)
        return cls(factory, tuple(parameter_types))

    def build(self, arguments: Sequence[Any]) -> Any:
        return self.factory(*arguments)

    def __repr__(self) -> str:
        name = getattr(self.factory, "__qualname__", repr(self.factory))
        params = ", ".join(getattr(t, "__name__", repr(t)) for t in self.parameter_types)
        return f"ConstructorSignature({name}({params}))"


def resolve_constructor(
    raw_args: Sequence[str],
    candidates: Sequence[ConstructorSignature],
    *,
    command_name: str = "command",
) -> Result[Any, ConstructorResolutionError]:
    """Build a command from *raw_args* using the first compatible candidate.

    Returns ``Ok(command)`` or ``Err(ConstructorResolutionError)``. Malformed
    literals only disqualify the candidate being tried. Exceptions raised by
    the selected factory itself (including ``__post_init__`` validation)
    propagate to the caller.
    """
    raw_args = tuple(raw_args)
    for candidate in candidates:
        if candidate.arity != len(raw_args):
            continue
        try:
            values = [coerce(raw, declared) for raw, declared in zip(raw_args, candidate.parameter_types)]
        except ValueError as exc:
            logger.debug("coercion.candidate_rejected", candidate=repr(candidate), reason=str(exc))
            continue
        return Ok(candidate.build(values))

    return Err(
        ConstructorResolutionError(
            command_name,
            raw_args,
            tried_arities=[candidate.arity for candidate in candidates],
        )
    )


__all__ = ["ConstructorSignature", "coerce", "resolve_constructor"]

"""Application CQRS – CliInvocation: command id and arguments taken from argv."""
from __future__ import annotations

import dataclasses
from typing import Sequence

from command_dispatch.kernel.errors import MissingCommandSelectorError

DEFAULT_COMMAND_FLAG = "-command="
DEFAULT_ARGUMENT_FLAG = "-arg="


def is_cli_mode(argv: Sequence[str], command_flag: str = DEFAULT_COMMAND_FLAG) -> bool:
    """True when any token selects a command."""
    return any(token.startswith(command_flag) for token in argv)


@dataclasses.dataclass(frozen=True)
class CliInvocation:
    """Which command to run and its positional string arguments."""

    command_id: str
    arguments: tuple[str, ...] = ()

    @classmethod
    def parse(
        cls,
        argv: Sequence[str],
        *,
        command_flag: str = DEFAULT_COMMAND_FLAG,
        argument_flag: str = DEFAULT_ARGUMENT_FLAG,
    ) -> CliInvocation:
        """Extract the first selector and the argument tokens that follow it.

        Argument tokens before the selector, and tokens matching neither flag,
        are ignored.

        Raises:
            MissingCommandSelectorError: no token starts with *command_flag*.
        """
        tokens = list(argv)
        for index, token in enumerate(tokens):
            if not token.startswith(command_flag):
                continue
            arguments = tuple(
                later[len(argument_flag):]
                for later in tokens[index + 1:]
                if later.startswith(argument_flag)
            )
            return cls(token[len(command_flag):], arguments)
        raise MissingCommandSelectorError(command_flag)


__all__ = ["DEFAULT_ARGUMENT_FLAG", "DEFAULT_COMMAND_FLAG", "CliInvocation", "is_cli_mode"]

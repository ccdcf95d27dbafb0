"""Config settings – BusSettings."""
from __future__ import annotations

import dataclasses
import logging

from command_dispatch.config.settings.base import Settings
from command_dispatch.config.validation.errors import InvalidSettingValueError


@dataclasses.dataclass
class BusSettings(Settings):
    """Flags recognised in the process argument vector, plus the log level.

    Environment: ``COMMAND_BUS_COMMAND_FLAG``, ``COMMAND_BUS_ARGUMENT_FLAG``,
    ``COMMAND_BUS_LOG_LEVEL``.
    """

    _prefix: dataclasses.ClassVar[str] = "COMMAND_BUS"

    command_flag: str = "-command="
    argument_flag: str = "-arg="
    log_level: str = "INFO"

    def _validate(self) -> None:
        if not self.command_flag:
            raise InvalidSettingValueError("command_flag", self.command_flag, "must not be empty")
        if not self.argument_flag:
            raise InvalidSettingValueError("argument_flag", self.argument_flag, "must not be empty")
        if self.command_flag.startswith(self.argument_flag) or self.argument_flag.startswith(
            self.command_flag
        ):
            raise InvalidSettingValueError(
                "argument_flag",
                self.argument_flag,
                "must differ from command_flag and neither may be a prefix of the other",
            )
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown logging level")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


__all__ = ["BusSettings"]

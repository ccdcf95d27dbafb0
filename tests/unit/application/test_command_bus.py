"""Unit tests for CommandBus — typed dispatch, CLI dispatch and the hook protocol."""

from __future__ import annotations

import dataclasses
from typing import Any

import pytest
from structlog.testing import capture_logs

from command_dispatch.application.cqrs import (
    BusMode,
    Command,
    CommandBus,
    CommandHandler,
    CommandResult,
    ConstructorSignature,
    LoggingCommandBus,
)
from command_dispatch.config.settings import BusSettings
from command_dispatch.kernel.errors import BusStateError, MissingCommandSelectorError


# ---------------------------------------------------------------------------
# Commands / handlers
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class AddNumbers(Command):
    left: int
    right: int


@dataclasses.dataclass(frozen=True)
class Shout(Command):
    text: str

    @classmethod
    def repeated(cls, left: int, right: int) -> "Shout":
        return cls(f"{left}{right}")


@dataclasses.dataclass(frozen=True)
class Explode(Command):
    reason: str


@dataclasses.dataclass(frozen=True)
class Silent(Command):
    pass


@dataclasses.dataclass(frozen=True)
class Orphan(Command):
    pass


@dataclasses.dataclass(frozen=True)
class Withdraw(Command):
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"amount must not be negative, got {self.amount}")


@dataclasses.dataclass(frozen=True)
class Note(Command):
    text: str | None


class AddHandler(CommandHandler[AddNumbers, int]):
    command_id = "add"

    def __init__(self) -> None:
        self.handled: list[AddNumbers] = []

    def handle(self, command: AddNumbers, result: CommandResult[int]) -> None:
        self.handled.append(command)
        result.put(command.left + command.right)


class ShoutHandler(CommandHandler[Shout, str]):
    command_id = "shout"
    constructors = (
        ConstructorSignature.from_callable(Shout.repeated),
        ConstructorSignature.from_callable(Shout),
    )

    def __init__(self) -> None:
        self.handled: list[Shout] = []

    def handle(self, command: Shout, result: CommandResult[str]) -> None:
        self.handled.append(command)
        result.put(command.text.upper())


class ExplodeHandler(CommandHandler[Explode, None]):
    command_id = "explode"

    def handle(self, command: Explode, result: CommandResult[None]) -> None:
        raise RuntimeError(command.reason)


class SilentHandler(CommandHandler[Silent, None]):
    command_id = "silent"


class WithdrawHandler(CommandHandler[Withdraw, int]):
    command_id = "withdraw"

    def handle(self, command: Withdraw, result: CommandResult[int]) -> None:
        result.put(command.amount)


class NoteHandler(CommandHandler[Note, str]):
    command_id = "note"

    def handle(self, command: Note, result: CommandResult[str]) -> None:
        result.put(command.text or "")


class CountingBus(CommandBus):
    """Counts finalizer runs and records the other hooks."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.finally_count = 0
        self.events: list[tuple[str, str]] = []
        self.exceptions: list[Exception] = []

    def before_execute_command(self, command_id: str, command: Command) -> None:
        self.events.append(("before", command_id))

    def on_command_executed(
        self, command_id: str, command: Command, result: CommandResult[Any]
    ) -> None:
        self.events.append(("executed", command_id))

    def on_command_exception(
        self, command_id: str, command: Command, exception: Exception
    ) -> None:
        self.events.append(("exception", command_id))
        self.exceptions.append(exception)

    def after_handle_finally(self) -> None:
        self.finally_count += 1


class FailingBeforeBus(CountingBus):
    """Before hook raises after recording itself."""

    def before_execute_command(self, command_id: str, command: Command) -> None:
        super().before_execute_command(command_id, command)
        raise RuntimeError("before hook failed")


def _handlers() -> list[CommandHandler[Any, Any]]:
    return [AddHandler(), ShoutHandler(), ExplodeHandler(), SilentHandler()]


def _web_bus(bus_class: type[CommandBus] = CountingBus) -> Any:
    return bus_class(_handlers()).start([])


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestCommandBusLifecycle:
    def test_new_bus_is_idle(self) -> None:
        assert CommandBus(_handlers()).mode is BusMode.IDLE

    def test_no_selector_means_web_mode(self) -> None:
        bus = CommandBus(_handlers()).start(["--port=8080", "-arg=3"])
        assert bus.mode is BusMode.WEB
        assert bus.is_cli_mode() is False
        assert bus.cli_result is None

    def test_selector_means_cli_mode(self) -> None:
        bus = CommandBus(_handlers()).start(["-command=add", "-arg=1", "-arg=2"])
        assert bus.mode is BusMode.CLI
        assert bus.is_cli_mode() is True

    def test_handle_before_start_raises(self) -> None:
        with pytest.raises(BusStateError):
            CommandBus(_handlers()).handle(AddNumbers(1, 2))

    def test_start_twice_raises(self) -> None:
        bus = CommandBus(_handlers()).start([])
        with pytest.raises(BusStateError, match="already started"):
            bus.start(["-command=add"])
        assert bus.mode is BusMode.WEB

    def test_registry_exposed_after_start(self) -> None:
        bus = CommandBus(_handlers()).start([])
        assert bus.registry.command_ids() == ["add", "explode", "shout", "silent"]


# ---------------------------------------------------------------------------
# Typed dispatch
# ---------------------------------------------------------------------------


class TestTypedDispatch:
    def test_routes_to_matching_handler_only(self) -> None:
        add, shout = AddHandler(), ShoutHandler()
        bus = CommandBus([add, shout]).start([])

        assert bus.handle(AddNumbers(2, 5)).get() == 7
        assert bus.handle(Shout("hi")).get() == "HI"
        assert add.handled == [AddNumbers(2, 5)]
        assert shout.handled == [Shout("hi")]

    def test_unhandled_command_returns_empty_result(self) -> None:
        bus = _web_bus()
        result = bus.handle(Orphan())
        assert isinstance(result, CommandResult)
        assert result.is_present() is False

    def test_unhandled_command_runs_no_hooks(self) -> None:
        bus = _web_bus()
        bus.handle(Orphan())
        assert bus.events == []
        assert bus.finally_count == 0

    def test_unhandled_command_is_logged(self) -> None:
        bus = _web_bus()
        with capture_logs() as logs:
            bus.handle(Orphan())
        assert logs[0]["event"] == "command.unhandled"
        assert logs[0]["command_type"] == "Orphan"

    def test_success_hook_order(self) -> None:
        bus = _web_bus()
        bus.handle(AddNumbers(1, 1))
        assert bus.events == [("before", "add"), ("executed", "add")]
        assert bus.finally_count == 1

    def test_handler_exception_is_reported_then_reraised(self) -> None:
        bus = _web_bus()
        with pytest.raises(RuntimeError, match="boom"):
            bus.handle(Explode("boom"))
        assert bus.events == [("before", "explode"), ("exception", "explode")]
        assert str(bus.exceptions[0]) == "boom"
        assert bus.finally_count == 1

    def test_handler_that_puts_nothing_returns_empty_result(self) -> None:
        bus = _web_bus()
        result = bus.handle(Silent())
        assert result.is_present() is False
        assert bus.events == [("before", "silent"), ("executed", "silent")]

    def test_finally_runs_once_per_dispatch_on_every_path(self) -> None:
        bus = _web_bus()
        bus.handle(AddNumbers(1, 2))
        bus.handle(Silent())
        with pytest.raises(RuntimeError):
            bus.handle(Explode("x"))
        assert bus.finally_count == 3

    def test_each_dispatch_gets_a_fresh_result(self) -> None:
        bus = _web_bus()
        first = bus.handle(AddNumbers(1, 2))
        second = bus.handle(AddNumbers(3, 4))
        assert first is not second
        assert (first.get(), second.get()) == (3, 7)

    def test_exception_in_executed_hook_goes_to_exception_hook(self) -> None:
        class FailingExecutedBus(CountingBus):
            def on_command_executed(self, command_id: str, command: Command, result: CommandResult[Any]) -> None:
                raise ValueError("hook failed")

        bus = FailingExecutedBus(_handlers()).start([])
        with pytest.raises(ValueError, match="hook failed"):
            bus.handle(AddNumbers(1, 2))
        assert bus.events == [("before", "add"), ("exception", "add")]
        assert bus.finally_count == 1


    def test_exception_in_before_hook_is_reported_and_finalized(self) -> None:
        bus = FailingBeforeBus(_handlers()).start([])
        add = bus.registry.resolve_by_id("add").unwrap()[1]
        with pytest.raises(RuntimeError, match="before hook failed"):
            bus.handle(AddNumbers(1, 2))
        assert bus.events == [("before", "add"), ("exception", "add")]
        assert str(bus.exceptions[0]) == "before hook failed"
        assert bus.finally_count == 1
        assert add.handled == []


# ---------------------------------------------------------------------------
# CLI dispatch
# ---------------------------------------------------------------------------


class TestCliDispatch:
    def test_end_to_end_add(self) -> None:
        bus = CommandBus(_handlers()).start(["-command=add", "-arg=3", "-arg=4"])
        assert bus.cli_result is not None
        assert bus.cli_result.get() == 7

    def test_hooks_run_around_cli_dispatch(self) -> None:
        bus = CountingBus(_handlers()).start(["-command=add", "-arg=3", "-arg=4"])
        assert bus.events == [("before", "add"), ("executed", "add")]
        assert bus.finally_count == 1

    def test_arguments_before_selector_are_excluded(self) -> None:
        bus = CommandBus(_handlers()).start(["-arg=100", "-command=add", "-arg=3", "-arg=4"])
        assert bus.cli_result.get() == 7

    def test_first_compatible_constructor_is_used(self) -> None:
        shout = ShoutHandler()
        CommandBus([shout]).start(["-command=shout", "-arg=1", "-arg=2"])
        assert shout.handled == [Shout("12")]

    def test_second_constructor_used_for_single_string(self) -> None:
        bus = CommandBus(_handlers()).start(["-command=shout", "-arg=hello"])
        assert bus.cli_result.get() == "HELLO"

    def test_incompatible_arguments_report_diagnostic(self) -> None:
        with capture_logs() as logs:
            bus = CountingBus(_handlers()).start(
                ["-command=shout", "-arg=3", "-arg=4", "-arg=5"]
            )
        assert bus.cli_result is None
        assert bus.events == []
        assert bus.finally_count == 0
        diagnostics = [e for e in logs if e["event"] == "cli.constructor_incompatible"]
        assert len(diagnostics) == 1
        assert diagnostics[0]["command_id"] == "shout"
        assert diagnostics[0]["arguments"] == ["3", "4", "5"]
        assert diagnostics[0]["log_level"] == "error"

    def test_malformed_literal_reports_diagnostic(self) -> None:
        with capture_logs() as logs:
            bus = CommandBus(_handlers()).start(["-command=add", "-arg=3", "-arg=four"])
        assert bus.cli_result is None
        assert any(e["event"] == "cli.constructor_incompatible" for e in logs)

    def test_unknown_command_id_reports_diagnostic(self) -> None:
        with capture_logs() as logs:
            bus = CountingBus(_handlers()).start(["-command=transfer"])
        assert bus.cli_result is None
        assert bus.finally_count == 0
        (entry,) = [e for e in logs if e["event"] == "cli.command_not_found"]
        assert entry["command_id"] == "transfer"
        assert entry["known_command_ids"] == ["add", "explode", "shout", "silent"]

    def test_handler_exception_is_swallowed_after_hook(self) -> None:
        with capture_logs() as logs:
            bus = CountingBus(_handlers()).start(["-command=explode", "-arg=kaput"])
        assert bus.events == [("before", "explode"), ("exception", "explode")]
        assert str(bus.exceptions[0]) == "kaput"
        assert bus.finally_count == 1
        assert bus.cli_result is not None
        assert bus.cli_result.is_present() is False
        assert any(e["event"] == "cli.command_failed" for e in logs)

    def test_exception_in_before_hook_is_swallowed_and_finalized(self) -> None:
        with capture_logs() as logs:
            bus = FailingBeforeBus(_handlers()).start(["-command=add", "-arg=3", "-arg=4"])
        assert bus.events == [("before", "add"), ("exception", "add")]
        assert bus.finally_count == 1
        assert bus.cli_result is not None
        assert bus.cli_result.is_present() is False
        assert any(e["event"] == "cli.command_failed" for e in logs)

    def test_constructor_validation_error_reports_diagnostic(self) -> None:
        with capture_logs() as logs:
            bus = CountingBus([WithdrawHandler()]).start(["-command=withdraw", "-arg=-5"])
        assert bus.mode is BusMode.CLI
        assert bus.cli_result is None
        assert bus.events == []
        assert bus.finally_count == 0
        (entry,) = [e for e in logs if e["event"] == "cli.constructor_incompatible"]
        assert entry["command_id"] == "withdraw"
        assert entry["arguments"] == ["-5"]
        assert entry["log_level"] == "error"
        assert isinstance(entry["exc_info"], ValueError)
        assert "negative" in entry["reason"]

    def test_constructor_validation_passes_for_valid_amount(self) -> None:
        bus = CommandBus([WithdrawHandler()]).start(["-command=withdraw", "-arg=5"])
        assert bus.cli_result.get() == 5

    def test_optional_string_parameter_from_command_line(self) -> None:
        bus = CommandBus([NoteHandler()]).start(["-command=note", "-arg=remember milk"])
        assert bus.cli_result is not None
        assert bus.cli_result.get() == "remember milk"

    def test_dispatch_cli_without_selector_is_fatal(self) -> None:
        bus = CommandBus(_handlers()).start([])
        with pytest.raises(MissingCommandSelectorError):
            bus.dispatch_cli(["-arg=3"])

    def test_custom_flags_from_settings(self) -> None:
        settings = BusSettings(command_flag="--run=", argument_flag="--with=")
        bus = CommandBus(_handlers(), settings=settings).start(
            ["-command=shout", "--run=add", "--with=5", "--with=6"]
        )
        assert bus.is_cli_mode()
        assert bus.cli_result.get() == 11

    def test_default_flags_ignored_under_custom_settings(self) -> None:
        settings = BusSettings(command_flag="--run=", argument_flag="--with=")
        bus = CommandBus(_handlers(), settings=settings).start(["-command=add", "-arg=1", "-arg=2"])
        assert bus.mode is BusMode.WEB

    def test_typed_dispatch_still_available_in_cli_mode(self) -> None:
        bus = CommandBus(_handlers()).start(["-command=add", "-arg=1", "-arg=2"])
        assert bus.handle(AddNumbers(10, 20)).get() == 30


# ---------------------------------------------------------------------------
# LoggingCommandBus
# ---------------------------------------------------------------------------


class TestLoggingCommandBus:
    def test_logs_start_and_completion(self) -> None:
        bus = _web_bus(LoggingCommandBus)
        with capture_logs() as logs:
            bus.handle(AddNumbers(1, 2))
        events = [e["event"] for e in logs]
        assert events == ["command.started", "command.completed"]
        completed = logs[1]
        assert completed["command_id"] == "add"
        assert completed["command"] == "AddNumbers"
        assert completed["has_result"] is True
        assert completed["duration_ms"] >= 0

    def test_logs_failure_and_reraises(self) -> None:
        bus = _web_bus(LoggingCommandBus)
        with capture_logs() as logs, pytest.raises(RuntimeError):
            bus.handle(Explode("bad"))
        failed = [e for e in logs if e["event"] == "command.failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "error"
        assert "bad" in failed[0]["error"]

    def test_no_events_for_unhandled_command(self) -> None:
        bus = _web_bus(LoggingCommandBus)
        with capture_logs() as logs:
            bus.handle(Orphan())
        assert [e["event"] for e in logs] == ["command.unhandled"]

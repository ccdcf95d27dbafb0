"""Testing fakes – in-memory doubles for the command bus."""
from command_dispatch.testing.fakes.bus import HookCall, RecordingCommandBus

__all__ = ["HookCall", "RecordingCommandBus"]

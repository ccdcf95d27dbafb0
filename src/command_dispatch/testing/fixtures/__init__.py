"""Testing fixtures – pytest fixtures for command bus doubles."""
from command_dispatch.testing.fixtures.bus import bus_settings, recording_bus_factory

__all__ = ["bus_settings", "recording_bus_factory"]

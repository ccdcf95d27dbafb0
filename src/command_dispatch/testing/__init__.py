"""Testing support – recording bus double and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["command_dispatch.testing.fixtures"]
"""

from command_dispatch.testing.fakes import HookCall, RecordingCommandBus

__all__ = ["HookCall", "RecordingCommandBus"]

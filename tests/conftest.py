"""Shared pytest configuration."""

pytest_plugins = ["command_dispatch.testing.fixtures"]

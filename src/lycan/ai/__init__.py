"""Stub players for simulations and tests."""

from lycan.ai.stub_ai import StubPlayer, create_stub_player

__all__ = ["StubPlayer", "create_stub_player"]

"""Shared test fixtures."""

import pytest


class ScriptedRandom:
    """Random source replaying a fixed sequence of draws.

    Cycles through ``values`` so tests do not need to know exactly how
    many draws a render takes.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted_rng():
    """Factory for scripted random sources."""
    return ScriptedRandom

import matplotlib

matplotlib.use("Agg")

import pytest


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def constant_rng():
    return ConstantRandom(0.5)

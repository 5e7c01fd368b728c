# conftest.py

import numpy as np
import pytest


class FixedRandom:
    """Stands in for np.random.Generator where a test needs a known uniform draw."""
    def __init__(self, value: float):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_random():
    return FixedRandom

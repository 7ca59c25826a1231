"""
Pytest configuration and shared fixtures for mcmc2d tests.
"""

import pytest
import numpy as np

from mcmc2d.seeded_random import SeededRandom
from mcmc2d.registry import _REGISTRY


class QuadraticOracle:
    """Standard bivariate normal: log π = -(x² + y²)/2, so U = (x² + y²)/2."""

    def __init__(self):
        self.calls = 0

    def get_log_probability(self, x, y):
        self.calls += 1
        return -0.5 * (x * x + y * y)

    def get_log_probability_gradient(self, x, y):
        return (-x, -y)


class FailingOracle:
    """Oracle whose every evaluation raises, as a density with a domain error would."""

    def get_log_probability(self, x, y):
        raise ValueError(f"log density undefined at ({x}, {y})")

    def get_log_probability_gradient(self, x, y):
        raise ValueError(f"gradient undefined at ({x}, {y})")


class FixedRandom(SeededRandom):
    """Random source pinned to a single uniform value."""

    def __init__(self, u=0.5):
        super().__init__(0)
        self.u = u

    def random(self):
        return self.u


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def quadratic_oracle():
    return QuadraticOracle()


@pytest.fixture
def failing_oracle():
    return FailingOracle()


@pytest.fixture
def fixed_rng():
    """RNG whose uniforms are always 0.5."""
    return FixedRandom(0.5)


@pytest.fixture
def quadratic_potential():
    """U(x, y) = (x² + y²)/2 and its gradient."""
    def U(x, y):
        return 0.5 * (x * x + y * y)

    def grad_u(x, y):
        return (x, y)

    return U, grad_u


@pytest.fixture
def clean_registry():
    """
    Snapshot the density registry and restore it after the test.

    Usage:
        def test_something(clean_registry):
            register_density('tmp', {...})
    """
    saved = dict(_REGISTRY)
    yield _REGISTRY
    _REGISTRY.clear()
    _REGISTRY.update(saved)


def make_ar1_chain(n, rho, seed=0):
    """AR(1) chain of (x, y) pairs with unit-variance innovations."""
    rng = np.random.default_rng(seed)
    out = np.zeros((n, 2))
    noise = rng.standard_normal((n, 2))
    out[0] = noise[0]
    for t in range(1, n):
        out[t] = rho * out[t - 1] + noise[t]
    return out

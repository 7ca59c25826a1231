"""
Density oracles backed by JAX automatic differentiation.

JaxDensity turns a log-density written with jax.numpy into the oracle the
samplers consume: get_log_probability(x, y) and
get_log_probability_gradient(x, y), both returning plain Python floats.
The value and gradient functions are jit-compiled once per density.

This module also defines the built-in example densities. They are
unnormalized; only differences in log density matter to the samplers.
"""

from . import jax_config  # noqa: F401

import jax
import jax.numpy as jnp
from jax.scipy.special import logsumexp

from .registry import register_density, list_densities


class JaxDensity:
    """
    Log-density oracle from a function of a length-2 position vector.

    Args:
        log_density_fn: q -> scalar log density, with q = jnp.array([x, y]).
                        Must be traceable by JAX.
        name: Optional name used in repr and logs
    """

    def __init__(self, log_density_fn, name=""):
        self.log_density_fn = log_density_fn
        self.name = name
        self._value_fn = jax.jit(log_density_fn)
        self._grad_fn = jax.jit(jax.grad(log_density_fn))

    def get_log_probability(self, x, y):
        return float(self._value_fn(jnp.array([x, y], dtype=jnp.float64)))

    def get_log_probability_gradient(self, x, y):
        grad = self._grad_fn(jnp.array([x, y], dtype=jnp.float64))
        return float(grad[0]), float(grad[1])

    def __repr__(self):
        name = self.name or getattr(self.log_density_fn, "__name__", "log_density")
        return f"JaxDensity({name})"


# ============================================================================
# BUILT-IN DENSITIES
# ============================================================================

def gaussian_log_density(q):
    """exp(-(x^2 + y^2)/2)"""
    return -0.5 * jnp.sum(q ** 2)


_BIMODAL_CENTERS = jnp.array([[2.0, 0.0], [-2.0, 0.0]])
_BIMODAL_WEIGHTS = jnp.array([0.2, 1.0])


def bimodal_log_density(q):
    """0.2 * exp(-((x-2)^2 + y^2)/2) + exp(-((x+2)^2 + y^2)/2)"""
    sq_dist = jnp.sum((q - _BIMODAL_CENTERS) ** 2, axis=1)
    return logsumexp(-0.5 * sq_dist, b=_BIMODAL_WEIGHTS)


_MULTIMODAL_CENTERS = jnp.array([[0.0, 0.0], [4.0, 0.0], [-4.0, 0.0], [0.0, 4.0], [0.0, -4.0]])


def multimodal_log_density(q):
    """Five unit-width peaks of height 2 at the origin and (±4, 0), (0, ±4)"""
    sq_dist = jnp.sum((q - _MULTIMODAL_CENTERS) ** 2, axis=1)
    return logsumexp(-sq_dist, b=2.0)


def rosenbrock_log_density(q):
    """exp(-(1-x)^2 - 100*(y-x^2)^2)"""
    x, y = q[0], q[1]
    return -(1.0 - x) ** 2 - 100.0 * (y - x ** 2) ** 2


def donut_log_density(q):
    """exp(-(sqrt(x^2 + y^2) - 3)^2)/2"""
    r = jnp.sqrt(jnp.sum(q ** 2))
    return -(r - 3.0) ** 2 - jnp.log(2.0)


PREDEFINED_DENSITIES = {
    'gaussian': {
        'log_density': gaussian_log_density,
        'label': 'Gaussian',
        'expression': 'exp(-(x^2 + y^2)/2)',
    },
    'bimodal': {
        'log_density': bimodal_log_density,
        'label': 'Bimodal (Asymmetric)',
        'expression': '0.2 * exp(-((x-2)^2 + y^2)/2) + exp(-((x+2)^2 + y^2)/2)',
    },
    'multimodal': {
        'log_density': multimodal_log_density,
        'label': 'Multi-modal (5 peaks)',
        'expression': ('2*exp(-((x)^2 + (y)^2)) + 2*exp(-((x-4)^2 + (y)^2)) + '
                       '2*exp(-((x+4)^2 + (y)^2)) + 2*exp(-((x)^2 + (y-4)^2)) + '
                       '2*exp(-((x)^2 + (y+4)^2))'),
    },
    'rosenbrock': {
        'log_density': rosenbrock_log_density,
        'label': 'Rosenbrock-ish',
        'expression': 'exp(-(1-x)^2 - 100*(y-x^2)^2)',
    },
    'donut': {
        'log_density': donut_log_density,
        'label': 'Donut',
        'expression': 'exp(-(sqrt(x^2 + y^2) - 3)^2)/2',
        # Gradient of the radius is undefined at the origin
        'initial_position': (3.0, 0.0),
    },
}


def register_predefined_densities():
    """Register every built-in density that is not already registered."""
    registered = set(list_densities())
    for name, config in PREDEFINED_DENSITIES.items():
        if name not in registered:
            register_density(name, config)

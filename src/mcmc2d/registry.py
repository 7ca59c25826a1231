"""
Density Registration System

This module provides a registry of named target densities that the
controller can sample by name. User code registers densities via
register_density(), and the controller builds an oracle via get_oracle().

Example usage:
    import jax.numpy as jnp
    from mcmc2d import register_density, get_oracle

    def banana(q):
        x, y = q[0], q[1]
        return -0.5 * x ** 2 - 0.5 * (y - x ** 2) ** 2

    register_density('banana', {
        'log_density': banana,
        # optional:
        'label': 'Banana',
        'expression': 'exp(-x^2/2 - (y - x^2)^2/2)',
        'initial_position': (0.0, 0.0),
    })

    oracle = get_oracle('banana')
"""

_REGISTRY = {}


def register_density(name, config):
    """
    Register a target density.

    Args:
        name: Unique identifier string (e.g., 'gaussian')
        config: Dict with keys:

            Required:
                log_density: fn(q) -> scalar
                    Unnormalized log density of q = [x, y], written with
                    jax.numpy so that it can be differentiated.

            Optional:
                label: Human-readable name
                expression: Density as a math string, for display
                initial_position: Suggested starting point (x, y)

    Raises:
        ValueError: If required keys are missing or name is already registered.
    """
    if name in _REGISTRY:
        raise ValueError(f"Density '{name}' is already registered")

    required_keys = ['log_density']
    missing = [k for k in required_keys if k not in config]
    if missing:
        raise ValueError(f"Missing required keys for density '{name}': {missing}")

    if not callable(config['log_density']):
        raise ValueError(f"'log_density' for density '{name}' must be callable")

    _REGISTRY[name] = config


def get_density(name):
    """
    Get a registered density configuration by name.

    Raises:
        KeyError: If the density is not registered
    """
    if name not in _REGISTRY:
        available = list(_REGISTRY.keys())
        raise KeyError(f"Unknown density '{name}'. Available: {available}")
    return _REGISTRY[name]


def get_oracle(name):
    """
    Build a JaxDensity oracle for a registered density.

    Raises:
        KeyError: If the density is not registered
    """
    from .densities import JaxDensity

    config = get_density(name)
    return JaxDensity(config['log_density'], name=name)


def list_densities():
    """List all registered density names."""
    return list(_REGISTRY.keys())


def clear_registry():
    """
    Clear all registered densities. Primarily for testing.
    """
    _REGISTRY.clear()

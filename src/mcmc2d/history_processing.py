"""
History processing utilities for sampler output.

This module provides functions for:
- Applying read-time burn-in to stored chains
- Converting chains of Points to NumPy arrays
- Per-chain summary statistics

Burn-in here never modifies stored samples; it returns a view of the tail.
"""

import logging

import numpy as np

from .mcmc.types import as_point

logger = logging.getLogger('mcmc2d')


def apply_burnin(samples, burn_in):
    """
    Drop the first burn_in samples.

    Args:
        samples: Sequence of samples (list of Points or (n, 2) array)
        burn_in: Number of leading samples to exclude

    Returns:
        The remaining samples, same container type; empty if burn_in >= len.
    """
    if burn_in < 0:
        raise ValueError(f"burn_in must be >= 0, got {burn_in}")

    n_total = len(samples)
    n_dropped = min(burn_in, n_total)
    logger.debug(f"Burn-in filter (burn_in={burn_in}): dropped {n_dropped}, kept {n_total - n_dropped}")

    return samples[burn_in:]


def samples_to_array(samples):
    """Convert a chain of Points / pairs / {'x','y'} dicts to an (n, 2) float array."""
    if isinstance(samples, np.ndarray):
        return np.asarray(samples, dtype=float).reshape(-1, 2)
    return np.array([as_point(s) for s in samples], dtype=float).reshape(-1, 2)


def prepare_chain_data(samples, samples_2=None, burn_in=0):
    """
    Apply burn-in to one or two chains for downstream summaries.

    Returns:
        Dict with 'chain1' (list) and 'chain2' (list, or None when there is
        no second chain).
    """
    return {
        'chain1': list(apply_burnin(samples or [], burn_in)),
        'chain2': list(apply_burnin(samples_2, burn_in)) if samples_2 is not None else None,
    }


def summarize_samples(samples):
    """
    Mean, standard deviation and range of a chain on each axis.

    Returns:
        Dict with 'n' and per-axis arrays 'mean', 'std', 'min', 'max'
        (NaN when the chain is empty).
    """
    arr = samples_to_array(samples)
    n = arr.shape[0]
    if n == 0:
        nan = np.full(2, np.nan)
        return {'n': 0, 'mean': nan, 'std': nan.copy(), 'min': nan.copy(), 'max': nan.copy()}

    return {
        'n': n,
        'mean': np.mean(arr, axis=0),
        'std': np.std(arr, axis=0, ddof=1) if n > 1 else np.zeros(2),
        'min': np.min(arr, axis=0),
        'max': np.max(arr, axis=0),
    }

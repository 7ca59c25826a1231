"""
Error Handling and Validation Utilities for the Sampler Engine

This module provides validation functions and diagnostic tools for sampling.
"""

import math
from typing import Any, Dict, List, Sequence

import numpy as np

from .chain_specs import SamplerType

import logging
logger = logging.getLogger('mcmc2d')

# Acceptance rate below which an HMC chain is reported as struggling
LOW_ACCEPTANCE_RATE = 0.10


def _sampler_param_errors(params: Dict[str, Any]) -> List[str]:
    errors = []

    epsilon = params.get('epsilon')
    if epsilon is not None:
        if not isinstance(epsilon, (int, float, np.number)) or not math.isfinite(epsilon) or epsilon <= 0:
            errors.append(f"epsilon must be a finite number > 0, got {epsilon!r}")

    L = params.get('L')
    if L is not None:
        if isinstance(L, bool) or not isinstance(L, (int, np.integer)) or L < 0:
            errors.append(f"L must be an integer >= 0, got {L!r}")

    width = params.get('width')
    if width is not None:
        if not isinstance(width, (int, float, np.number)) or not math.isfinite(width) or width <= 0:
            errors.append(f"width must be a finite number > 0, got {width!r}")

    return errors


def validate_sampler_params(params: Dict[str, Any]) -> None:
    """
    Validates sampler settings. Only keys that are present are checked.

    Args:
        params: Partial settings dict (epsilon, L, width)

    Raises:
        ValueError: If any setting is invalid
    """
    errors = _sampler_param_errors(params)
    if errors:
        raise ValueError("Invalid sampler settings:\n  " + "\n  ".join(errors))


def validate_controller_config(config: Dict[str, Any]) -> None:
    """
    Validates that a controller configuration is sensible.

    Args:
        config: Configuration dictionary (lowercase keys, see mcmc/utils.py)

    Raises:
        ValueError: If configuration is invalid
    """
    errors = []

    for key in ('sampler_type', 'sampler_type_2'):
        if config.get(key) is not None:
            try:
                SamplerType.parse(config[key])
            except ValueError as e:
                errors.append(str(e))

    if 'burn_in' in config:
        burn_in = config['burn_in']
        if isinstance(burn_in, bool) or not isinstance(burn_in, (int, np.integer)) or burn_in < 0:
            errors.append(f"burn_in must be an integer >= 0, got {burn_in!r}")

    for key in ('initial_position', 'initial_position_2'):
        if config.get(key) is not None:
            position = config[key]
            try:
                ok = len(position) == 2 and all(math.isfinite(float(v)) for v in position)
            except (TypeError, ValueError):
                ok = False
            if not ok:
                errors.append(f"{key} must be a finite (x, y) pair, got {position!r}")

    for key in ('seed', 'seed_2'):
        seed = config.get(key)
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, np.integer))):
            errors.append(f"{key} must be an integer or None, got {seed!r}")

    errors.extend(_sampler_param_errors(config))

    if errors:
        raise ValueError("Invalid sampler configuration:\n  " + "\n  ".join(errors))


def diagnose_sampler_issues(chains: Sequence[Any], acceptance_rates: Sequence[float] = None) -> Dict[str, Any]:
    """
    Analyzes stored chains to identify common issues.

    Args:
        chains: Sequence of chains, each an (n, 2) array-like of samples
        acceptance_rates: Optional per-chain acceptance rates

    Returns:
        diagnostics: Dictionary with issues, warnings, and info
    """
    diagnostics = {
        'issues': [],
        'warnings': [],
        'info': []
    }

    total = 0
    for j, chain in enumerate(chains):
        samples = np.asarray(chain, dtype=float).reshape(-1, 2)
        total += samples.shape[0]

        # Check for NaN/Inf in samples
        if not np.all(np.isfinite(samples)):
            diagnostics['issues'].append(
                f"Chain {j} contains NaN or Inf values - sampler became unstable"
            )

        # Check for stuck chains (variance near zero)
        if samples.shape[0] > 1 and np.all(np.var(samples, axis=0) < 1e-10):
            diagnostics['warnings'].append(
                f"Chain {j} appears stuck (near-zero variance over {samples.shape[0]} samples)"
            )

    if acceptance_rates is not None:
        for j, rate in enumerate(acceptance_rates):
            if rate is not None and rate < LOW_ACCEPTANCE_RATE:
                diagnostics['warnings'].append(
                    f"Chain {j} acceptance rate {rate:.1%} is below {LOW_ACCEPTANCE_RATE:.0%}; "
                    f"try a smaller epsilon"
                )

    # Summary info
    diagnostics['info'].append(f"Total samples: {total}")
    diagnostics['info'].append(f"Number of chains: {len(chains)}")

    return diagnostics


def print_diagnostics(diagnostics: Dict[str, Any]) -> None:
    """Pretty-print diagnostics from diagnose_sampler_issues."""
    if diagnostics['issues']:
        logger.error("[ERROR] ISSUES:")
        for issue in diagnostics['issues']:
            logger.error(f"  - {issue}")

    if diagnostics['warnings']:
        logger.warning("[WARN] WARNINGS:")
        for warning in diagnostics['warnings']:
            logger.warning(f"  - {warning}")

    if diagnostics['info']:
        logger.info("[INFO] INFO:")
        for info in diagnostics['info']:
            logger.info(f"  - {info}")

    if not diagnostics['issues'] and not diagnostics['warnings']:
        logger.info("[OK] No issues detected")

"""
MCMC Diagnostics.

Convergence diagnostics for completed chains of 2D samples:
- calculate_gelman_rubin: Potential scale reduction factor R-hat (Gelman & Rubin, 1992)
- calculate_ess: Effective sample size with Geyer's initial positive sequence
- autocorrelation: Pooled autocorrelation function across chains
- print_convergence_summary: Log R-hat / ESS with a convergence check
- print_acceptance_summary: Log per-chain acceptance statistics

Chains are truncated to the length of the shortest one (first n samples),
and each axis is treated independently. Results are Point(x, y) or None
when there is not enough data.
"""

import logging
from typing import Any, Optional, Sequence

import numpy as np

from .types import Point, as_point

logger = logging.getLogger('mcmc2d')

# Conventional R-hat threshold for declaring convergence
RHAT_THRESHOLD = 1.1


def _as_sample_array(chain) -> np.ndarray:
    """Convert one chain (Points, pairs, {'x','y'} dicts or an array) to (n, 2)."""
    if isinstance(chain, np.ndarray):
        return np.asarray(chain, dtype=float).reshape(-1, 2)
    return np.array([as_point(s) for s in chain], dtype=float).reshape(-1, 2)


def _stack_chains(chains: Sequence[Any], min_chains: int) -> Optional[np.ndarray]:
    """
    Stack chains into an (m, n, 2) array truncated to the common length.

    Returns None if there are fewer than min_chains chains or any chain has
    fewer than 2 samples.
    """
    if chains is None or len(chains) < min_chains:
        return None

    arrays = []
    for chain in chains:
        if chain is None:
            return None
        samples = _as_sample_array(chain)
        if samples.shape[0] < 2:
            return None
        arrays.append(samples)

    n = min(a.shape[0] for a in arrays)
    return np.stack([a[:n] for a in arrays])


def _pooled_autocovariance(centered: np.ndarray, k: int) -> np.ndarray:
    """
    Lag-k autocovariance averaged over chains, denominator n.

    Args:
        centered: (m, n, 2) chains with their per-chain means removed
        k: Lag, 0 <= k < n

    Returns:
        (2,) array, one value per axis
    """
    n = centered.shape[1]
    cross = np.sum(centered[:, :n - k, :] * centered[:, k:, :], axis=1) / n
    return np.mean(cross, axis=0)


def calculate_gelman_rubin(chains: Sequence[Any]) -> Optional[Point]:
    """
    Gelman-Rubin potential scale reduction factor for each axis.

    With m chains of common length n, per-chain means μ_j and sample
    variances s_j² (ddof=1):
        W = mean(s_j²)
        B = n / (m - 1) * Σ (μ_j - μ̄)²
        V̂ = (n - 1) / n * W + B / n
        R̂ = sqrt(V̂ / W)

    When W = 0 every chain is constant: R̂ is 1 if they agree (B = 0) and
    +inf if they do not.

    Args:
        chains: At least 2 chains, each with at least 2 samples

    Returns:
        Point(x=R̂_x, y=R̂_y), or None if the input is insufficient.
    """
    data = _stack_chains(chains, min_chains=2)
    if data is None:
        return None

    m, n, _ = data.shape

    chain_means = np.mean(data, axis=1)                 # (m, 2)
    chain_vars = np.var(data, axis=1, ddof=1)           # (m, 2)
    overall_mean = np.mean(chain_means, axis=0)         # (2,)

    W = np.mean(chain_vars, axis=0)
    B = (n / (m - 1)) * np.sum((chain_means - overall_mean) ** 2, axis=0)
    V_hat = ((n - 1) / n) * W + (1.0 / n) * B

    rhat = []
    for d in range(2):
        if W[d] == 0:
            rhat.append(1.0 if B[d] == 0 else float('inf'))
        else:
            rhat.append(float(np.sqrt(V_hat[d] / W[d])))

    return Point(*rhat)


def calculate_ess(chains: Sequence[Any]) -> Optional[Point]:
    """
    Effective sample size for each axis.

    Autocorrelations ρ(k) are pooled across chains (autocovariance with
    denominator n, averaged over chains, divided by the pooled lag-0 value).
    The integrated autocorrelation time is truncated with Geyer's initial
    positive sequence: Γ_t = ρ(2t-1) + ρ(2t) is summed for t = 1, 2, ...
    until Γ_t <= 0 or 2t exceeds ⌊n/2⌋.

        τ = 1 + 2 Σ Γ_t,    ESS = min(N / τ, N),    N = m * n

    Constant chains (zero pooled variance) report ESS = N.

    Args:
        chains: At least 1 chain, each with at least 2 samples

    Returns:
        Point(x=ESS_x, y=ESS_y), or None if the input is insufficient.
    """
    data = _stack_chains(chains, min_chains=1)
    if data is None:
        return None

    m, n, _ = data.shape
    total_samples = m * n
    max_lag = n // 2

    centered = data - np.mean(data, axis=1, keepdims=True)
    gamma0 = _pooled_autocovariance(centered, 0)

    ess = []
    for d in range(2):
        if gamma0[d] == 0:
            ess.append(float(total_samples))
            continue

        def rho(k):
            return _pooled_autocovariance(centered[:, :, d:d + 1], k)[0] / gamma0[d]

        sum_gamma = 0.0
        t = 1
        while 2 * t <= max_lag:
            pair = rho(2 * t - 1) + rho(2 * t)
            if pair <= 0:
                break
            sum_gamma += pair
            t += 1

        tau = 1.0 + 2.0 * sum_gamma
        ess.append(float(min(total_samples / tau, total_samples)))

    return Point(*ess)


def autocorrelation(chains: Sequence[Any], max_lag: Optional[int] = None) -> Optional[np.ndarray]:
    """
    Pooled autocorrelation function ρ(0..max_lag) for each axis.

    Args:
        chains: At least 1 chain, each with at least 2 samples
        max_lag: Largest lag to compute; defaults to ⌊n/2⌋, capped at n - 1

    Returns:
        (max_lag + 1, 2) array; columns with zero variance are NaN after lag 0.
        None if the input is insufficient.
    """
    data = _stack_chains(chains, min_chains=1)
    if data is None:
        return None

    n = data.shape[1]
    if max_lag is None:
        max_lag = n // 2
    max_lag = int(min(max_lag, n - 1))

    centered = data - np.mean(data, axis=1, keepdims=True)
    acov = np.array([_pooled_autocovariance(centered, k) for k in range(max_lag + 1)])
    with np.errstate(divide='ignore', invalid='ignore'):
        rho = acov / acov[0]
    rho[0] = 1.0
    return rho


def print_convergence_summary(rhat: Optional[Point], ess: Optional[Point] = None,
                              threshold: float = RHAT_THRESHOLD) -> bool:
    """
    Log R-hat and ESS per axis and report whether the chains look converged.

    Returns:
        True if R-hat is available and below threshold on both axes.
    """
    logger.info("--- Convergence Diagnostics ---")

    if ess is not None:
        logger.info(f"  ESS:   x={ess.x:.1f}  y={ess.y:.1f}")

    if rhat is None:
        logger.info("  R-hat: unavailable (need 2 chains with >= 2 post burn-in samples)")
        return False

    logger.info(f"  R-hat: x={rhat.x:.4f}  y={rhat.y:.4f}  (threshold {threshold})")

    if not (np.isfinite(rhat.x) and np.isfinite(rhat.y)):
        logger.warning("  R-hat is infinite: constant chains disagree")
        return False

    converged = max(rhat) < threshold
    if converged:
        logger.info(f"  Converged (max < {threshold})")
    else:
        logger.info(f"  Not Converged (max = {max(rhat):.4f} >= {threshold})")
    return converged


def print_acceptance_summary(labels: Sequence[str], accepted: Sequence[int], rejected: Sequence[int]) -> None:
    """
    Log acceptance statistics for each chain.

    Args:
        labels: Chain labels
        accepted: Accepted transition counts
        rejected: Rejected transition counts
    """
    logger.info(f"--- Acceptance Rates ({len(labels)} chains) ---")
    for label, n_acc, n_rej in zip(labels, accepted, rejected):
        total = n_acc + n_rej
        if total == 0:
            logger.info(f"  {label}: no transitions yet")
            continue
        rate = n_acc / total
        logger.info(f"  {label}: {rate:.1%} ({n_acc}/{total})")
        if rate < 0.10:
            logger.warning(f"  WARNING: {label} acceptance rate < 10%")

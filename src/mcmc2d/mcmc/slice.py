"""
Univariate slice sampling (Neal, 2003) with stepping-out and shrinkage.

Algorithm:
1. Draw the slice level: log_y = log f(x0) - e, e ~ Exp(1)
2. Place a bracket [L, R] of the given width randomly around x0
3. Step out: widen each side by `width` while its endpoint is inside the slice
4. Shrink: draw uniformly from [L, R]; accept if inside the slice, otherwise
   move the endpoint on the same side as the draw to the draw and retry

Both loops are capped so that a pathological density costs a bounded amount
of work per call.
"""

import logging
from typing import Callable

from ..seeded_random import SeededRandom
from ..settings import MAX_SHRINK_STEPS, MAX_STEP_OUT

logger = logging.getLogger('mcmc2d')

LogDensity1D = Callable[[float], float]


def sample_slice(
    log_density: LogDensity1D,
    x0: float,
    width: float,
    rng: SeededRandom,
    max_step_out: int = MAX_STEP_OUT,
    max_shrink_steps: int = MAX_SHRINK_STEPS,
) -> float:
    """
    Perform one slice-sampling update of a scalar.

    Args:
        log_density: Unnormalized log density of the target, x -> float
        x0: Current value
        width: Typical slice width; also the stepping-out increment
        rng: Random source (required; draws are consumed in a fixed order)
        max_step_out: Stepping-out cap per direction
        max_shrink_steps: Shrinkage cap before giving up

    Returns:
        The new value, or x0 if shrinkage did not find a point in the slice.
    """
    log_y = log_density(x0) - rng.exponential()

    u = rng.random() * width
    left = x0 - u
    right = x0 + (width - u)

    steps = 0
    while steps < max_step_out and log_density(left) > log_y:
        left -= width
        steps += 1

    steps = 0
    while steps < max_step_out and log_density(right) > log_y:
        right += width
        steps += 1

    for _ in range(max_shrink_steps):
        x1 = left + rng.random() * (right - left)
        if log_density(x1) >= log_y:
            return x1
        if x1 < x0:
            left = x1
        else:
            right = x1

    logger.warning(
        f"Slice sampler found no point in the slice after {max_shrink_steps} "
        f"shrinkage steps; keeping x0={x0}"
    )
    return x0

"""
Chain Specification System

This module defines how each chain in a multi-chain run is described:
which transition kernel it uses, where it starts and how its random
source is seeded.

1. Self-documenting: ChainSpec names every field instead of positional tuples
2. Validated: bad sampler types and positions fail at definition time
3. Reproducible: the seed lives on the spec, so reset() can restore it
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np


# ============================================================================
# SAMPLER TYPE ENUMERATION
# ============================================================================

class SamplerType(IntEnum):
    """
    Enumeration of available transition kernels.

    Concrete classes are looked up in the dispatch table in mcmc/sampling.py.
    """
    HMC = 0      # Hamiltonian Monte Carlo with leapfrog dynamics
    GIBBS = 1    # Coordinate-wise Gibbs with univariate slice sampling

    def __str__(self):
        return self.name

    @classmethod
    def parse(cls, value) -> 'SamplerType':
        """
        Accept a SamplerType, its integer value, or its name ('hmc', 'GIBBS').

        Raises:
            ValueError: If the value names no known sampler
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                pass
        valid = ', '.join(m.name for m in cls)
        raise ValueError(f"Unknown sampler type {value!r}. Valid types: {valid}")


# ============================================================================
# CHAIN SPECIFICATION
# ============================================================================

@dataclass(frozen=True)
class ChainSpec:
    """
    Specification for one chain.

    Required fields:
        sampler_type: Which kernel advances this chain

    Optional fields:
        initial_position: Starting point (x, y); default origin
        seed: Seed restored on every reset; None means clock-seeded
        label: Human-readable name for logging
        metadata: Additional info (not used by the sampler)

    Examples:
        ChainSpec(SamplerType.HMC, initial_position=(0.0, 0.0), seed=42)
        ChainSpec(SamplerType.GIBBS, initial_position=(1.0, 1.0), label="chain 2")
    """
    sampler_type: SamplerType
    initial_position: Tuple[float, float] = (0.0, 0.0)
    seed: Optional[int] = None
    label: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'sampler_type', SamplerType.parse(self.sampler_type))

        try:
            x, y = self.initial_position
            position = (float(x), float(y))
        except (TypeError, ValueError):
            raise ValueError(
                f"initial_position must be an (x, y) pair, got {self.initial_position!r}"
            ) from None
        if not all(np.isfinite(position)):
            raise ValueError(f"initial_position must be finite, got {position}")
        object.__setattr__(self, 'initial_position', position)

        if self.seed is not None and not isinstance(self.seed, (int, np.integer)):
            raise ValueError(f"seed must be an integer or None, got {type(self.seed)}")

    def with_updates(self, **changes) -> 'ChainSpec':
        """Copy of this spec with the given fields replaced."""
        return replace(self, **changes)

    def __str__(self):
        name = self.label or str(self.sampler_type)
        return f"{name} @ {self.initial_position} (seed={self.seed})"

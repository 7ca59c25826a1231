"""
Sampler abstraction and dispatch.

Every transition kernel satisfies the Sampler protocol:
    set_params(**partial)      update hyperparameters in place
    set_seed(seed | None)      re-seed the kernel's own random source
    step(state, oracle)        one Markov transition -> StepResult

The controller only ever talks to this protocol. Concrete classes are chosen
by SamplerType through SAMPLER_DISPATCH_TABLE, so adding a kernel means
adding an enum value and a table entry.
"""

from typing import Dict, Optional, Protocol, Type, runtime_checkable

from ..chain_specs import SamplerType
from ..seeded_random import SeededRandom
from .gibbs import GibbsSampler
from .hmc import HMCSampler
from .types import DensityOracle, ParticleState, StepResult


@runtime_checkable
class Sampler(Protocol):
    """Capability contract shared by all transition kernels."""

    sampler_type: SamplerType
    rng: SeededRandom

    def set_params(self, **params) -> None:
        ...

    def set_seed(self, seed: Optional[int]) -> None:
        ...

    def step(self, state: ParticleState, oracle: DensityOracle) -> StepResult:
        ...


SAMPLER_DISPATCH_TABLE: Dict[SamplerType, Type[Sampler]] = {
    SamplerType.HMC: HMCSampler,
    SamplerType.GIBBS: GibbsSampler,
}


def create_sampler(sampler_type, params=None, seed=None) -> Sampler:
    """
    Instantiate the kernel registered for sampler_type.

    Args:
        sampler_type: SamplerType, its value, or its name ('hmc', 'gibbs')
        params: Optional partial settings shared by all kernels
        seed: Integer seed, or None for a clock-derived seed

    Raises:
        ValueError: If sampler_type is unknown
    """
    sampler_type = SamplerType.parse(sampler_type)
    return SAMPLER_DISPATCH_TABLE[sampler_type](params=params, seed=seed)

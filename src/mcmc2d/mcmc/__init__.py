"""
MCMC Subpackage - Core sampling implementation.

This package contains the core sampling logic:
- backend: Multi-chain controller (MultiChainController)
- types: Core value types (Point, ParticleState, StepResult)
- integrator: Leapfrog integration of Hamiltonian dynamics
- hmc: Hamiltonian Monte Carlo transition
- slice: One-dimensional slice sampling
- gibbs: Coordinate-wise slice Gibbs transition
- sampling: Sampler protocol and dispatch by SamplerType
- diagnostics: Convergence diagnostics (R-hat, ESS)
- utils: Miscellaneous utilities
"""

# Import types first (needed by other modules)
from .types import Point, ParticleState, StepResult, DensityOracle, as_point

from .integrator import leapfrog_step, integrate
from .hmc import HMCSampler, hmc_step, generate_proposal, acceptance_probability, kinetic_energy
from .slice import sample_slice
from .gibbs import GibbsSampler
from .sampling import Sampler, SAMPLER_DISPATCH_TABLE, create_sampler

# Import main entry point
from .backend import MultiChainController, ChainState, IterationResult

from .diagnostics import (
    calculate_gelman_rubin,
    calculate_ess,
    autocorrelation,
    print_convergence_summary,
    print_acceptance_summary,
)

__all__ = [
    # Main entry point
    'MultiChainController',
    'ChainState',
    'IterationResult',
    # Types
    'Point',
    'ParticleState',
    'StepResult',
    'DensityOracle',
    'as_point',
    # Kernels
    'leapfrog_step',
    'integrate',
    'HMCSampler',
    'hmc_step',
    'generate_proposal',
    'acceptance_probability',
    'kinetic_energy',
    'sample_slice',
    'GibbsSampler',
    'Sampler',
    'SAMPLER_DISPATCH_TABLE',
    'create_sampler',
    # Diagnostics
    'calculate_gelman_rubin',
    'calculate_ess',
    'autocorrelation',
    'print_convergence_summary',
    'print_acceptance_summary',
]

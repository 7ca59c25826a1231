"""
mcmc2d - Interactive MCMC Sampling on Two-Dimensional Densities

Public API:
    Registration:
        register_density - Register a named target density
        get_density - Retrieve a registered density configuration
        get_oracle - Build a differentiable oracle for a registered density
        list_densities - List all registered densities

    Chain Specifications:
        ChainSpec - Dataclass for per-chain configuration
        SamplerType - Enum for transition kernels (HMC, GIBBS)

    Settings:
        SettingName - Enum of sampler setting names (epsilon, L, width)
        SETTING_DEFAULTS - Default sampler settings

    Random Numbers:
        SeededRandom - Deterministic Mulberry32 generator

    Controller:
        MultiChainController - Drives one or two chains and diagnostics

    Diagnostics:
        calculate_gelman_rubin - Per-axis potential scale reduction factor
        calculate_ess - Per-axis effective sample size

Example:
    from mcmc2d import MultiChainController, ChainSpec, SamplerType

    controller = MultiChainController(
        density='gaussian',
        params={'epsilon': 0.1, 'L': 10},
        chain_specs=[
            ChainSpec(SamplerType.HMC, (0.0, 0.0), seed=42),
            ChainSpec(SamplerType.HMC, (1.0, 1.0), seed=43),
        ],
    )
    controller.run(500)
    print(controller.gelman_rubin(), controller.ess())
"""
# CRITICAL: Import jax_config FIRST to set environment variables before JAX loads
from . import jax_config  # noqa: F401

# Import mcmc subpackage before modules that depend on its types
from . import mcmc as _mcmc  # noqa: F401

from .registry import register_density, get_density, get_oracle, list_densities
from .chain_specs import ChainSpec, SamplerType
from .settings import SettingName, SETTING_DEFAULTS, build_settings
from .seeded_random import SeededRandom
from .history_processing import apply_burnin, prepare_chain_data, summarize_samples
from .densities import JaxDensity, PREDEFINED_DENSITIES, register_predefined_densities

# Main entry points
from .mcmc import (
    MultiChainController,
    Point,
    ParticleState,
    StepResult,
    HMCSampler,
    GibbsSampler,
    create_sampler,
    calculate_gelman_rubin,
    calculate_ess,
)

register_predefined_densities()

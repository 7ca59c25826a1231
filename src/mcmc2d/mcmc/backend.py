"""
Multi-Chain Controller - Main Entry Point.

This module provides MultiChainController, which owns one or two chains,
drives N-iteration runs and feeds the diagnostics. The implementation is
split across several modules:

- types: Value types (Point, ParticleState, StepResult)
- sampling: Sampler protocol and dispatch by SamplerType
- hmc / gibbs / slice / integrator: Transition kernels
- diagnostics: R-hat and ESS

Scheduling is cooperative: iter_steps() is a generator that yields after
every iteration, so a host event loop can interleave other work between
transitions and stop at any point. Transitions that already happened are
never rolled back.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..chain_specs import ChainSpec, SamplerType
from ..error_handling import (
    diagnose_sampler_issues,
    print_diagnostics,
    validate_controller_config,
    validate_sampler_params,
)
from ..history_processing import apply_burnin, summarize_samples
from ..settings import DEFAULT_BURN_IN, DEFAULT_INITIAL_POSITIONS, MAX_CHAINS, build_settings
from .diagnostics import (
    calculate_ess,
    calculate_gelman_rubin,
    print_acceptance_summary,
    print_convergence_summary,
)
from .sampling import Sampler, create_sampler
from .types import DensityOracle, ParticleState, Point, StepResult
from .utils import clean_config

logger = logging.getLogger('mcmc2d')

__all__ = [
    'ChainState',
    'IterationResult',
    'MultiChainController',
]


@dataclass(frozen=True)
class IterationResult:
    """One scheduling unit: the step results of every chain for one iteration."""
    iteration: int
    results: Tuple[StepResult, ...]


class ChainState:
    """
    Everything one chain owns: its spec, sampler, current particle,
    accepted samples, rejection counter and latest trajectory.
    """

    def __init__(self, spec: ChainSpec, params: Dict[str, Any]):
        self.spec = spec
        self.sampler: Sampler = create_sampler(spec.sampler_type, params, spec.seed)
        self.reset()

    def reset(self) -> None:
        self.particle = ParticleState.at(self.spec.initial_position)
        self.samples: List[Point] = []
        self.trajectory: Tuple[Point, ...] = ()
        self.rejected_count = 0
        if self.spec.seed is not None:
            self.sampler.set_seed(self.spec.seed)

    @property
    def label(self) -> str:
        return self.spec.label or str(self.spec.sampler_type)

    @property
    def accepted_count(self) -> int:
        return len(self.samples)

    @property
    def acceptance_rate(self) -> Optional[float]:
        total = self.accepted_count + self.rejected_count
        return self.accepted_count / total if total else None

    def advance(self, oracle: DensityOracle) -> StepResult:
        """Run one transition and commit it to this chain."""
        result = self.sampler.step(self.particle, oracle)
        self.particle = result.state
        if result.accepted:
            self.samples.append(result.q)
        else:
            self.rejected_count += 1
        self.trajectory = result.trajectory
        return result


class MultiChainController:
    """
    Drives one or two chains over a shared density and shared settings.

    Args:
        density: Density oracle, registered density name, or None (set later
                 with set_density)
        params: Partial shared settings (epsilon, L, width)
        chain_specs: ChainSpec per chain (1 or 2); default one HMC chain at
                     the origin
        burn_in: Default number of leading samples excluded from diagnostics
                 and summaries. Stored samples are never discarded.
    """

    def __init__(
        self,
        density=None,
        params: Optional[Dict[str, Any]] = None,
        chain_specs: Optional[Sequence[ChainSpec]] = None,
        burn_in: int = DEFAULT_BURN_IN,
    ):
        self.params = build_settings(params)
        validate_sampler_params(self.params)

        if burn_in < 0:
            raise ValueError(f"burn_in must be >= 0, got {burn_in}")
        self.burn_in = burn_in

        specs = list(chain_specs) if chain_specs else [ChainSpec(SamplerType.HMC)]
        if len(specs) > MAX_CHAINS:
            raise ValueError(f"At most {MAX_CHAINS} chains are supported, got {len(specs)}")
        self.chains: List[ChainState] = [ChainState(spec, self.params) for spec in specs]

        self.density: Optional[DensityOracle] = None
        self.iteration = 0
        if density is not None:
            self.set_density(density)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'MultiChainController':
        """
        Build a controller from a plain config dict (see mcmc/utils.py for keys).

        Raises:
            ValueError: If the configuration is invalid
        """
        config = clean_config(config)
        validate_controller_config(config)

        specs = [ChainSpec(
            sampler_type=config['sampler_type'],
            initial_position=config['initial_position'],
            seed=config['seed'],
        )]
        if config['second_chain']:
            specs.append(ChainSpec(
                sampler_type=config['sampler_type_2'],
                initial_position=config['initial_position_2'],
                seed=config['seed_2'],
            ))

        params = {k: config[k] for k in ('epsilon', 'L', 'width')}
        return cls(density=config['density'], params=params, chain_specs=specs,
                   burn_in=config['burn_in'])

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_density(self, density) -> None:
        """
        Install a new target density and reset all chains.

        Args:
            density: Oracle object, or the name of a registered density
        """
        if isinstance(density, str):
            from ..registry import get_oracle
            density = get_oracle(density)
        self.density = density
        self.reset()

    def set_params(self, **params) -> None:
        """Update shared settings and push them to every sampler."""
        validate_sampler_params(params)
        params = {k: v for k, v in params.items() if v is not None}
        self.params.update(params)
        for chain in self.chains:
            chain.sampler.set_params(**params)

    def set_sampler_type(self, sampler_type, index: Optional[int] = None) -> None:
        """
        Switch the transition kernel of one chain (or all, if index is None).
        Switching clears all chains so that no run mixes kernels mid-chain.
        """
        sampler_type = SamplerType.parse(sampler_type)
        targets = range(len(self.chains)) if index is None else [self._check_index(index)]
        for i in targets:
            spec = self.chains[i].spec.with_updates(sampler_type=sampler_type)
            self.chains[i] = ChainState(spec, self.params)
        self.reset()

    def set_seed(self, seed: Optional[int], index: int = 0) -> None:
        """Set a chain's seed; the sampler is re-seeded immediately and on every reset."""
        chain = self.chains[self._check_index(index)]
        chain.spec = chain.spec.with_updates(seed=seed)
        chain.sampler.set_seed(seed)

    def set_initial_position(self, position, index: int = 0) -> None:
        """Set a chain's starting point; takes effect at the next reset()."""
        chain = self.chains[self._check_index(index)]
        chain.spec = chain.spec.with_updates(initial_position=tuple(position))

    def add_chain(self, spec: Optional[ChainSpec] = None) -> ChainState:
        """
        Enable an additional chain.

        Args:
            spec: Chain specification. Default: same kernel as the first chain,
                  starting at (1, 1), clock-seeded.

        Raises:
            ValueError: If MAX_CHAINS chains are already present
        """
        if len(self.chains) >= MAX_CHAINS:
            raise ValueError(f"At most {MAX_CHAINS} chains are supported")
        if spec is None:
            spec = ChainSpec(
                sampler_type=self.chains[0].spec.sampler_type if self.chains else SamplerType.HMC,
                initial_position=DEFAULT_INITIAL_POSITIONS[len(self.chains)],
            )
        chain = ChainState(spec, self.params)
        self.chains.append(chain)
        return chain

    def remove_chain(self, index: int = -1) -> ChainSpec:
        """Disable a chain and discard its samples. The first chain cannot be removed."""
        index = self._check_index(index)
        if len(self.chains) == 1:
            raise ValueError("Cannot remove the only chain")
        return self.chains.pop(index).spec

    def _check_index(self, index: int) -> int:
        n = len(self.chains)
        if not -n <= index < n:
            raise IndexError(f"Chain index {index} out of range for {n} chain(s)")
        return index % n

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def iter_steps(self, n: int) -> Iterator[IterationResult]:
        """
        Generator of n iterations, yielding after each one.

        Each iteration steps every chain in order (chain 0 finishes before
        chain 1 starts), appends accepted samples, replaces each chain's
        trajectory and increments the shared iteration counter.

        Raises:
            RuntimeError: If no density has been set
            ValueError: If n is negative
        """
        if self.density is None:
            raise RuntimeError("No density set; call set_density() first")
        if n < 0:
            raise ValueError(f"Number of steps must be >= 0, got {n}")
        return self._iterate(n)

    def _iterate(self, n: int) -> Iterator[IterationResult]:
        for _ in range(n):
            results = []
            for chain in self.chains:
                try:
                    results.append(chain.advance(self.density))
                except Exception as e:
                    logger.error(
                        f"Density evaluation failed in {chain.label} at "
                        f"iteration {self.iteration + 1}: {e}"
                    )
                    raise
            self.iteration += 1
            yield IterationResult(self.iteration, tuple(results))

    def run(self, n: int) -> Optional[IterationResult]:
        """Run n iterations to completion; returns the last IterationResult."""
        last = None
        for last in self.iter_steps(n):
            pass
        return last

    def step(self) -> IterationResult:
        """Run a single iteration."""
        return self.run(1)

    def reset(self) -> None:
        """
        Return every chain to its initial position with cleared samples and
        counters, re-seeded to its initial seed. The density is kept.
        """
        self.iteration = 0
        for chain in self.chains:
            chain.reset()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def trajectories(self) -> List[Tuple[Point, ...]]:
        return [chain.trajectory for chain in self.chains]

    @property
    def current_particles(self) -> List[ParticleState]:
        return [chain.particle for chain in self.chains]

    def chain_samples(self, index: int = 0, burn_in: Optional[int] = None) -> List[Point]:
        """Accepted samples of one chain after burn-in."""
        burn_in = self.burn_in if burn_in is None else burn_in
        return apply_burnin(self.chains[self._check_index(index)].samples, burn_in)

    def gelman_rubin(self, burn_in: Optional[int] = None) -> Optional[Point]:
        """
        R-hat across chains after burn-in; None unless there are 2 chains,
        each with more than burn_in samples and at least 2 left afterwards.
        """
        burn_in = self.burn_in if burn_in is None else burn_in
        if len(self.chains) < 2:
            return None
        if any(chain.accepted_count <= burn_in for chain in self.chains):
            return None
        return calculate_gelman_rubin([self.chain_samples(i, burn_in) for i in range(len(self.chains))])

    def ess(self, burn_in: Optional[int] = None) -> Optional[Point]:
        """Effective sample size pooled over all chains after burn-in."""
        burn_in = self.burn_in if burn_in is None else burn_in
        return calculate_ess([self.chain_samples(i, burn_in) for i in range(len(self.chains))])

    def summary(self, burn_in: Optional[int] = None) -> Dict[str, Any]:
        """
        Per-chain statistics and convergence diagnostics after burn-in.

        Returns:
            Dict with 'iteration', 'burn_in', 'chains' (list of per-chain
            dicts), 'rhat' and 'ess'.
        """
        burn_in = self.burn_in if burn_in is None else burn_in
        chains = []
        for i, chain in enumerate(self.chains):
            stats = summarize_samples(self.chain_samples(i, burn_in))
            chains.append({
                'label': chain.label,
                'sampler_type': chain.spec.sampler_type,
                'seed': chain.spec.seed,
                'accepted': chain.accepted_count,
                'rejected': chain.rejected_count,
                'acceptance_rate': chain.acceptance_rate,
                'n_kept': stats['n'],
                'mean': stats['mean'],
                'std': stats['std'],
            })
        return {
            'iteration': self.iteration,
            'burn_in': burn_in,
            'chains': chains,
            'rhat': self.gelman_rubin(burn_in),
            'ess': self.ess(burn_in),
        }

    def print_summary(self, burn_in: Optional[int] = None) -> Dict[str, Any]:
        """Log acceptance, convergence and chain-health reports; returns summary()."""
        summary = self.summary(burn_in)
        chains = summary['chains']
        print_acceptance_summary(
            [c['label'] for c in chains],
            [c['accepted'] for c in chains],
            [c['rejected'] for c in chains],
        )
        print_convergence_summary(summary['rhat'], summary['ess'])

        kept = [np.asarray(self.chain_samples(i, summary['burn_in']), dtype=float)
                for i in range(len(self.chains))]
        print_diagnostics(diagnose_sampler_issues(
            kept,
            acceptance_rates=[c['acceptance_rate'] for c in chains],
        ))
        return summary

    def __repr__(self):
        chains = ', '.join(str(chain.spec) for chain in self.chains)
        return f"MultiChainController(iteration={self.iteration}, chains=[{chains}])"

"""
Hamiltonian Monte Carlo (HMC) sampler.

One transition:
    1. Resample momentum p ~ N(0, I)
    2. Simulate L leapfrog steps of the dynamics for H(q, p) = U(q) + |p|^2 / 2,
       where U(q) = -log π(q)
    3. Negate the final momentum (makes the proposal an involution)
    4. Accept with probability min(1, exp(H_initial - H_proposed))

The trajectory of every transition is returned, accepted or not, so that
callers can display rejected proposals too.
"""

import math
from typing import Callable, List, NamedTuple, Optional

from ..chain_specs import SamplerType
from ..error_handling import validate_sampler_params
from ..seeded_random import SeededRandom
from ..settings import SettingName, build_settings
from .integrator import GradientFn, integrate
from .types import ZERO, DensityOracle, ParticleState, Point, StepResult

PotentialFn = Callable[[float, float], float]


class HMCProposal(NamedTuple):
    """Proposal produced by the leapfrog dynamics before accept/reject."""
    q_proposed: Point
    p_proposed: Point
    H_initial: float
    H_proposed: float
    trajectory: List[Point]


def kinetic_energy(p: Point) -> float:
    """K(p) = |p|^2 / 2 for unit mass."""
    return 0.5 * p.squared_norm()


def acceptance_probability(H_initial: float, H_proposed: float) -> float:
    """
    Metropolis acceptance probability min(1, exp(H_initial - H_proposed)).

    Saturates instead of raising: an energy gain of +inf gives 0, a drop
    too large for exp() gives 1, and a NaN difference gives 0.
    """
    log_alpha = H_initial - H_proposed
    if math.isnan(log_alpha):
        return 0.0
    if log_alpha >= 0.0:
        return 1.0
    return math.exp(log_alpha)


def generate_proposal(
    q: Point,
    epsilon: float,
    L: int,
    U: PotentialFn,
    grad_u: GradientFn,
    rng: SeededRandom,
) -> HMCProposal:
    """
    Draw a momentum and integrate the dynamics to a proposal.

    Args:
        q: Current position
        epsilon: Leapfrog step size
        L: Number of leapfrog steps
        U: Potential energy (x, y) -> float
        grad_u: Gradient of U, (x, y) -> (dU/dx, dU/dy)
        rng: Random source; consumes two uniforms per momentum component

    Returns:
        HMCProposal with the proposed phase-space point, both energies and
        the L + 1 point trajectory.
    """
    p_initial = Point(rng.randn(), rng.randn())
    H_initial = kinetic_energy(p_initial) + U(q.x, q.y)

    q_proposed, p_proposed, trajectory = integrate(q, p_initial, epsilon, L, grad_u)
    p_proposed = -p_proposed

    H_proposed = kinetic_energy(p_proposed) + U(q_proposed.x, q_proposed.y)

    return HMCProposal(q_proposed, p_proposed, H_initial, H_proposed, trajectory)


def hmc_step(
    q: Point,
    epsilon: float,
    L: int,
    U: PotentialFn,
    grad_u: GradientFn,
    rng: SeededRandom,
) -> StepResult:
    """
    Execute one full HMC transition from position q.

    Returns:
        StepResult. On rejection q is the starting position and p is (0, 0);
        the proposed trajectory is returned either way.
    """
    proposal = generate_proposal(q, epsilon, L, U, grad_u, rng)

    alpha = acceptance_probability(proposal.H_initial, proposal.H_proposed)
    accepted = rng.random() < alpha

    if accepted:
        return StepResult(
            q=proposal.q_proposed,
            p=proposal.p_proposed,
            accepted=True,
            trajectory=tuple(proposal.trajectory),
        )
    return StepResult(
        q=q,
        p=ZERO,
        accepted=False,
        trajectory=tuple(proposal.trajectory),
    )


def potential_from_oracle(oracle: DensityOracle):
    """Build U(x, y) and ∇U(x, y) from a log-density oracle."""

    def U(x, y):
        return -oracle.get_log_probability(x, y)

    def grad_u(x, y):
        dx, dy = oracle.get_log_probability_gradient(x, y)
        return Point(-dx, -dy)

    return U, grad_u


class HMCSampler:
    """
    HMC transition kernel with its own seeded random source.

    Args:
        params: Optional partial settings, e.g. {'epsilon': 0.05, 'L': 20}
        seed: Integer seed, or None for a clock-derived seed
        rng: Pre-built random source; overrides seed when given
    """

    sampler_type = SamplerType.HMC

    def __init__(self, params=None, seed=None, rng: Optional[SeededRandom] = None):
        settings = build_settings(params)
        validate_sampler_params(settings)
        self.epsilon = float(settings[SettingName.EPSILON.value])
        self.L = int(settings[SettingName.L.value])
        if rng is not None:
            self.rng = rng
        else:
            self.set_seed(seed)

    @property
    def seed(self):
        return self.rng.get_seed()

    def set_params(self, **params):
        """Update epsilon and/or L; other keys are ignored."""
        validate_sampler_params(params)
        if params.get('epsilon') is not None:
            self.epsilon = float(params['epsilon'])
        if params.get('L') is not None:
            self.L = int(params['L'])

    def set_seed(self, seed):
        self.rng = SeededRandom(seed)

    def step(self, state: ParticleState, oracle: DensityOracle) -> StepResult:
        U, grad_u = potential_from_oracle(oracle)
        return hmc_step(state.q, self.epsilon, self.L, U, grad_u, self.rng)

    def __repr__(self):
        return f"HMCSampler(epsilon={self.epsilon}, L={self.L}, seed={self.seed})"
